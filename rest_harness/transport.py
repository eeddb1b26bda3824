"""HTTP transport built on httpx.

This module provides:
- PreparedRequest: the mutable request handed to a binding's auth hook
- ApiResponse: the immutable result of one round trip
- HttpxTransport: the stock Transport, one httpx.Client per instance

The transport performs exactly one round trip per `send` and never
retries. httpx network errors are mapped to TransportError here and
nowhere else; a URL httpx cannot parse is a ConfigurationError.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from rest_harness.exceptions import ConfigurationError, TransportError

if TYPE_CHECKING:
    from rest_harness.config import ClientConfig
    from rest_harness.targets import AbsoluteURL

logger = logging.getLogger(__name__)


@dataclass
class PreparedRequest:
    """A fully-resolved request that has not been sent yet.

    Bindings mutate `headers` and `body` in their `prepare_request` hook.

    Attributes:
        method: HTTP method, upper case.
        url: Absolute URL to send to.
        headers: Request headers (case-insensitive).
        body: Encoded request body, if any.

    """

    method: str
    url: AbsoluteURL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes | None = None

    def set_json_body(self, text: str) -> None:
        """Set a JSON body along with its Content-Type."""
        self.body = text.encode("utf-8")
        self.headers["Content-Type"] = "application/json"


@dataclass(frozen=True)
class ApiResponse:
    """Container for one HTTP response.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers (case-insensitive).
        content: Raw response body.
        url: URL the response came from (after redirects).

    """

    status_code: int
    headers: httpx.Headers
    content: bytes
    url: str

    @property
    def is_error(self) -> bool:
        """Check if the status code is 400 or above."""
        return self.status_code >= 400

    @property
    def link_header(self) -> str | None:
        """Get Link header for pagination."""
        return self.headers.get("Link")

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, with undecodable bytes replaced."""
        return self.content.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        """Return a representation of the response."""
        return f"ApiResponse(status={self.status_code}, url={self.url!r}, bytes={len(self.content)})"


def _map_httpx_error(error: httpx.HTTPError) -> TransportError:
    """Translate an httpx exception into a TransportError."""
    if isinstance(error, httpx.TimeoutException):
        return TransportError(f"Request timed out: {error}", original_error=error)
    if isinstance(error, httpx.ConnectError):
        return TransportError(f"Connection failed: {error}", original_error=error)
    return TransportError(f"HTTP error: {error}", original_error=error)


class HttpxTransport:
    """Transport backed by a single httpx.Client.

    Timeouts, TLS verification, redirects and connection pooling are
    httpx's business; this class only adapts its interface.

    Example:
        >>> transport = HttpxTransport(ClientConfig(timeout=10.0))
        >>> response = transport.send("GET", "https://example.com/api/ping", {})
        >>> transport.close()

    """

    __slots__ = ("_client",)

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Client configuration (timeout, TLS, redirects, User-Agent).
            transport: Optional low-level httpx transport, e.g. httpx.MockTransport.

        """
        self._client = httpx.Client(
            timeout=httpx.Timeout(config.timeout),
            verify=config.verify_tls,
            follow_redirects=config.follow_redirects,
            headers={"User-Agent": config.user_agent, "Accept": "application/json"},
            transport=transport,
        )

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> ApiResponse:
        """Perform one HTTP round trip.

        Raises:
            ConfigurationError: If httpx cannot parse the URL.
            TransportError: For connection, TLS and timeout failures.

        """
        logger.debug("Request: %s %s", method, url)

        try:
            response = self._client.request(method, url, headers=headers, content=body)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid request URL {url!r}: {e}") from e
        except httpx.HTTPError as e:
            raise _map_httpx_error(e) from e

        logger.debug(
            "Response: %d %s (%d bytes)",
            response.status_code,
            response.reason_phrase,
            len(response.content),
        )

        return ApiResponse(
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
            url=str(response.url),
        )

    def close(self) -> None:
        """Close the httpx client and release connections."""
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager and close the transport."""
        self.close()
