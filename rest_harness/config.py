"""Configuration management for rest-harness clients.

Configuration Precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables
    3. Default values

Environment Variables:
    REST_HARNESS_TIMEOUT: Request timeout in seconds (default: 30)
    REST_HARNESS_VERIFY_TLS: Verify TLS certificates (default: true)
    REST_HARNESS_USER_AGENT: User-Agent header
    REST_HARNESS_MAX_PAGES: Upper bound on pages fetched by autopagination

Example:
    >>> config = ClientConfig()
    >>> config = ClientConfig(timeout=60.0, verify_tls=False)
    >>> strict = config.with_overrides(max_pages=10)

"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import ClassVar

from dotenv import load_dotenv

from rest_harness.__version__ import __version__
from rest_harness.exceptions import ConfigurationError

# Auto-load .env file if it exists (searches current dir and parents)
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable configuration shared by a client and its transport.

    Attributes:
        timeout: Request timeout in seconds, enforced by the transport.
        verify_tls: Whether to verify TLS certificates.
        follow_redirects: Whether the transport follows redirects.
        user_agent: User-Agent header for requests.
        raise_for_status: Raise HTTPStatusError for JSON responses with status >= 400.
        max_pages: Default cap for autopagination (None for unlimited).

    """

    DEFAULT_TIMEOUT: ClassVar[float] = 30.0
    DEFAULT_USER_AGENT: ClassVar[str] = f"rest-harness/{__version__}"

    timeout: float = field(
        default_factory=lambda: _get_env_float("REST_HARNESS_TIMEOUT", ClientConfig.DEFAULT_TIMEOUT)
    )
    verify_tls: bool = field(default_factory=lambda: _get_env_bool("REST_HARNESS_VERIFY_TLS", True))
    follow_redirects: bool = True
    user_agent: str = field(
        default_factory=lambda: _get_env("REST_HARNESS_USER_AGENT", ClientConfig.DEFAULT_USER_AGENT)
    )
    raise_for_status: bool = True
    max_pages: int | None = field(
        default_factory=lambda: _get_env_int_optional("REST_HARNESS_MAX_PAGES")
    )

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.

        """
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        if not self.user_agent:
            raise ConfigurationError("user_agent cannot be empty")

        if self.max_pages is not None and self.max_pages < 1:
            raise ConfigurationError(f"max_pages must be at least 1, got {self.max_pages}")

    def with_overrides(self, **kwargs: object) -> ClientConfig:
        """Create a new configuration with specified overrides.

        Example:
            >>> base_config = ClientConfig(timeout=10.0)
            >>> test_config = base_config.with_overrides(verify_tls=False)

        """
        known = {f.name for f in fields(self)}
        unknown = set(kwargs) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        return replace(self, **kwargs)  # type: ignore[arg-type]


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default."""
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(key: str, default: bool) -> bool:
    """Get a boolean environment variable.

    Raises:
        ConfigurationError: If the value is not a recognised boolean.

    """
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def _get_env_int_optional(key: str) -> int | None:
    """Get an optional integer environment variable."""
    value = os.environ.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def _get_env_float(key: str, default: float) -> float:
    """Get a float environment variable with default."""
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e
