"""Opt-in retry with exponential backoff for callers.

The framework itself never retries; a request either succeeds or raises.
Callers that want retries wrap their own calls with the `retry` decorator.

Retry Conditions:
    - TransportError classified as retryable (timeouts, refused connections)
    - HTTPStatusError with 429, 500, 502, 503, 504 (respects Retry-After)

Non-Retryable:
    - Other status codes, auth, parse and configuration errors
    - DNS resolution failures

"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from rest_harness.exceptions import ClientError, HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

# Status codes that warrant a retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_retryable_error(error: Exception) -> bool:
    """Determine if an error should trigger a retry.

    Args:
        error: The exception to check.

    Returns:
        True if the error is transient and retryable.

    """
    if isinstance(error, HTTPStatusError):
        return error.status_code in RETRYABLE_STATUS_CODES

    if isinstance(error, TransportError):
        return error.is_retryable

    return False


def calculate_backoff(
    attempt: int,
    base_delay: float = 1.0,
    factor: float = 2.0,
    max_delay: float = 60.0,
    jitter: bool = True,
) -> float:
    """Calculate delay for exponential backoff.

    Args:
        attempt: Current attempt number (0-indexed).
        base_delay: Initial delay in seconds.
        factor: Exponential factor.
        max_delay: Maximum delay cap.
        jitter: Add randomness to prevent thundering herd.

    Returns:
        Delay in seconds before next retry.

    """
    delay = min(base_delay * (factor**attempt), max_delay)

    if jitter:
        # ±25%
        delay = delay * (0.75 + random.random() * 0.5)  # nosec B311

    return delay


class RetryConfig:
    """Retry settings, bundled for passing around."""

    __slots__ = ("backoff_factor", "base_delay", "max_attempts", "max_delay")

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        backoff_factor: float = 2.0,
        max_delay: float = 60.0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"RetryConfig(max_attempts={self.max_attempts}, base_delay={self.base_delay}, "
            f"backoff_factor={self.backoff_factor}, max_delay={self.max_delay})"
        )


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 60.0,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator that retries a function on transient failures.

    Args:
        max_attempts: Maximum number of attempts (including first try).
        base_delay: Initial delay between retries in seconds.
        backoff_factor: Multiplier for exponential backoff.
        max_delay: Maximum delay between retries.

    Returns:
        Decorated function with retry logic.

    Example:
        >>> @retry(max_attempts=3, base_delay=1.0)
        ... def fetch_projects():
        ...     return client.autopaginate("GET", "/projects")

    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except ClientError as e:
                    if not is_retryable_error(e):
                        raise

                    if attempt >= max_attempts - 1:
                        logger.warning(
                            "Max retries (%d) exhausted for %s",
                            max_attempts,
                            func.__name__,
                        )
                        raise

                    if isinstance(e, HTTPStatusError) and e.retry_after:
                        delay = float(e.retry_after)
                    else:
                        delay = calculate_backoff(attempt, base_delay, backoff_factor, max_delay)

                    logger.info(
                        "Retry %d/%d for %s after %.2fs: %s",
                        attempt + 1,
                        max_attempts - 1,
                        func.__name__,
                        delay,
                        str(e),
                    )

                    time.sleep(delay)

            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


def retry_from_config(config: RetryConfig) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Build a retry decorator from a RetryConfig."""
    return retry(
        max_attempts=config.max_attempts,
        base_delay=config.base_delay,
        backoff_factor=config.backoff_factor,
        max_delay=config.max_delay,
    )
