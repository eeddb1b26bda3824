"""Exception hierarchy for rest-harness.

Every error the framework raises derives from ClientError, so callers can
catch the whole family at once or pick out a single failure mode.

Exception Hierarchy:
    ClientError (base)
    ├── ConfigurationError     - Malformed base URI, invalid target composition
    │   └── InvalidTargetError - Relative target that is empty after stripping
    ├── TransportError         - Network, TLS and timeout failures
    ├── ParseError             - Malformed Link header
    │   └── DecodeError        - Response body is not UTF-8 or not valid JSON
    ├── AuthError              - Login answered, but no usable token came back
    └── HTTPStatusError        - Response status >= 400

Example:
    >>> try:
    ...     pages = client.autopaginate("GET", "/projects")
    ... except TransportError as e:
    ...     print(f"Server unreachable: {e}")
    ... except AuthError as e:
    ...     print(f"Wrong credentials: {e}")

"""

from __future__ import annotations

from typing import Any


class ClientError(Exception):
    """Base exception for all rest-harness errors.

    Attributes:
        message: Human-readable error description.
        response_data: Decoded response body, if one was available.

    """

    def __init__(
        self,
        message: str,
        response_data: Any = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            response_data: Decoded response body, if any.

        """
        self.message = message
        self.response_data = response_data
        super().__init__(message)

    def __repr__(self) -> str:
        """Return a detailed representation for debugging."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class ConfigurationError(ClientError):
    """Raised when a client or request target is composed incorrectly.

    This is a caller bug and never worth retrying.

    Example:
        >>> AbsoluteURL("not-a-url")
        ConfigurationError: Invalid absolute URL: 'not-a-url'

    """


class InvalidTargetError(ConfigurationError):
    """Raised when a relative target has no path left after stripping its leading slash."""

    def __init__(self, target: str, message: str | None = None) -> None:
        """Initialize invalid target error.

        Args:
            target: The offending relative path, as given.
            message: Optional override for the error message.

        """
        self.target = target
        super().__init__(message or f"Relative target {target!r} is empty")


class TransportError(ClientError):
    """Raised when the HTTP round trip itself fails.

    This includes connection failures, DNS resolution errors, timeouts
    and TLS errors. The framework never retries; see
    `rest_harness.utils.retry` for an opt-in decorator.

    Attributes:
        original_error: The underlying exception that caused this error.
        is_retryable: Whether this error is likely transient.

    """

    def __init__(
        self,
        message: str = "Transport error",
        original_error: Exception | None = None,
    ) -> None:
        """Initialize transport error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception.

        """
        self.original_error = original_error
        self.is_retryable = self._classify_retryable(original_error)
        super().__init__(message)

    @staticmethod
    def _classify_retryable(error: Exception | None) -> bool:
        """Determine if the transport error is likely transient.

        Args:
            error: The original exception.

        Returns:
            True if the error is likely transient and retryable.

        """
        if error is None:
            return True

        error_msg = str(error).lower()

        # DNS errors are configuration problems
        dns_indicators = [
            "failed to resolve",
            "nodename nor servname",
            "name or service not known",
            "getaddrinfo failed",
        ]
        if any(indicator in error_msg for indicator in dns_indicators):
            return False

        transient_indicators = [
            "connection refused",
            "connection reset",
            "broken pipe",
            "timed out",
            "timeout",
        ]
        return any(indicator in error_msg for indicator in transient_indicators)


class ParseError(ClientError):
    """Raised when a Link header does not match the pagination grammar.

    Attributes:
        raw: The offending text, kept for diagnosis.

    """

    def __init__(self, message: str, raw: str = "") -> None:
        """Initialize parse error.

        Args:
            message: Human-readable error description.
            raw: The text that failed to parse.

        """
        self.raw = raw
        super().__init__(message)


class DecodeError(ParseError):
    """Raised when a response body cannot be decoded as JSON.

    Malformed bodies are often meaningful (an HTML error page from a proxy,
    for instance), so the raw bytes travel with the exception.

    Attributes:
        body: The raw response body.

    Example:
        >>> client.request_json("GET", "/health")
        DecodeError: Failed to parse JSON: <html>502 Bad Gateway</html>

    """

    def __init__(self, message: str, body: bytes = b"") -> None:
        """Initialize decode error.

        Args:
            message: Human-readable error description.
            body: The raw response body.

        """
        self.body = body
        super().__init__(message, raw=body.decode("utf-8", errors="replace"))


class AuthError(ClientError):
    """Raised when a login round trip succeeds but yields no usable token.

    Distinct from TransportError so callers can tell "wrong credentials"
    from "server unreachable".

    Example:
        >>> client.login(UserPass("alice", "wrong"))
        AuthError: Could not log in with given username and password

    """

    def __init__(
        self,
        message: str = "Authentication failed",
        response_data: Any = None,
    ) -> None:
        """Initialize authentication error."""
        super().__init__(message, response_data)


class HTTPStatusError(ClientError):
    """Raised when a JSON request is answered with a status >= 400.

    Attributes:
        status_code: The HTTP status code.
        url: The URL that was requested.
        retry_after: Seconds from the Retry-After header, if present.

    """

    def __init__(
        self,
        message: str,
        response_data: Any = None,
        status_code: int = 500,
        url: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        """Initialize HTTP status error.

        Args:
            message: Human-readable error description.
            response_data: Decoded response body, if any.
            status_code: The HTTP status code.
            url: The URL that was requested.
            retry_after: Seconds until a retry is welcome.

        """
        self.status_code = status_code
        self.url = url
        self.retry_after = retry_after
        super().__init__(message, response_data)

    def __str__(self) -> str:
        """Return the message with the status code."""
        base = f"HTTP {self.status_code}: {self.message}"
        if self.retry_after:
            base += f" (retry after {self.retry_after}s)"
        return base


# =============================================================================
# Exception Factory
# =============================================================================


def exception_from_response(
    status_code: int,
    response_data: Any,
    headers: Any = None,
    url: str | None = None,
) -> HTTPStatusError:
    """Create an HTTPStatusError from an HTTP error response.

    Args:
        status_code: HTTP status code.
        response_data: Decoded response body (any JSON value, or None).
        headers: Response headers (for Retry-After).
        url: The requested URL.

    Returns:
        An HTTPStatusError describing the response.

    """
    headers = headers or {}
    message = f"HTTP {status_code}"
    if isinstance(response_data, dict):
        # GitLab uses "message", Vault uses "errors", OAuth uses "error_description"
        for key in ("message", "error_description", "error"):
            if isinstance(response_data.get(key), str):
                message = response_data[key]
                break
        else:
            errors = response_data.get("errors")
            if isinstance(errors, list) and errors:
                message = "; ".join(str(e) for e in errors)

    retry_after_str = headers.get("Retry-After")
    retry_after = int(retry_after_str) if retry_after_str and retry_after_str.isdigit() else None

    return HTTPStatusError(
        message=message,
        response_data=response_data,
        status_code=status_code,
        url=url,
        retry_after=retry_after,
    )
