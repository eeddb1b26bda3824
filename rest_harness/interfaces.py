"""Capability contracts.

Each capability is a structural Protocol, so a binding only has to provide
the right methods; nothing has to inherit from a framework class.
BaseApiClient in `rest_harness.client` is the stock implementation of
ApiClient and JsonApiClient that the bundled bindings build on.

Capabilities:
    - Transport: one blocking HTTP round trip
    - JsonCodec: text <-> JSON value
    - ApiClient: base URI, login, per-request auth hook, request
    - JsonApiClient: JSON decoding and autopagination on top of ApiClient

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rest_harness.credentials import Credentials
    from rest_harness.targets import AbsoluteURL, RequestTarget
    from rest_harness.transport import ApiResponse, PreparedRequest


@runtime_checkable
class Transport(Protocol):
    """Performs exactly one HTTP round trip per call.

    Rules:
    - `send` blocks until a response arrives or the transport's own timeout elapses.
    - No retries; failures raise TransportError.
    - Owned by one client; not meant to be shared between clients.
    """

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> ApiResponse:
        """Send one request to a fully-resolved absolute URL."""
        ...

    def close(self) -> None:
        """Release connections."""
        ...


@runtime_checkable
class JsonCodec(Protocol):
    """Converts between JSON text and Python values."""

    def dumps(self, value: Any) -> str: ...

    def loads(self, text: str) -> Any: ...


@runtime_checkable
class ApiClient(Protocol):
    """Contract every binding satisfies."""

    @property
    def base_uri(self) -> AbsoluteURL:
        """Base URI that relative targets are resolved against."""
        ...

    def login(self, credentials: Credentials) -> None:
        """Authenticate, storing the resulting token on the client."""
        ...

    def prepare_request(self, request: PreparedRequest) -> None:
        """Decorate an outgoing request with authentication headers or body."""
        ...

    def request(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
    ) -> ApiResponse:
        """Resolve, decorate and send one request; return the raw response."""
        ...


@runtime_checkable
class JsonApiClient(ApiClient, Protocol):
    """ApiClient that also decodes JSON and walks paginated collections."""

    def next_page_target(self, response: ApiResponse) -> AbsoluteURL | None:
        """Return the continuation URL for a response, or None when done."""
        ...

    def request_json(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
    ) -> Any:
        """Send one request and decode its body as JSON."""
        ...

    def autopaginate(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
        max_pages: int | None = None,
    ) -> list[Any]:
        """Fetch every page of a collection, in server order."""
        ...
