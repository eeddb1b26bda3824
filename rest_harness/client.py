"""Base API client.

BaseApiClient is the stock implementation of the ApiClient and
JsonApiClient capabilities. A binding subclasses it and supplies:

- `prepare_request`: attach authentication headers/body to each request
- `exchange_password`: turn UserPass credentials into a SessionToken
  (only for APIs with a password login)
- optionally `next_page_target`, for APIs that do not paginate with a
  Link header

Everything else (target resolution, body encoding, dispatch, JSON
decoding and autopagination) is shared. The transport and JSON codec are
injected, so tests and alternative HTTP stacks plug in without
subclassing.

Example:
    >>> with GitlabClient("https://gitlab.example.com/api/v4") as client:
    ...     client.login(ApiKey("glpat-xxxxxxxx"))
    ...     pages = client.autopaginate("GET", "/projects")

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from rest_harness.config import ClientConfig
from rest_harness.credentials import (
    ApiKey,
    NoAuth,
    SessionToken,
    TokenKind,
    UserPass,
    UserPassTwoFactor,
)
from rest_harness.exceptions import (
    AuthError,
    ClientError,
    ConfigurationError,
    DecodeError,
    HTTPStatusError,
    exception_from_response,
)
from rest_harness.serialization import DEFAULT_CODEC, JsonParams, decode_json_body
from rest_harness.targets import AbsoluteURL, as_target, resolve
from rest_harness.transport import HttpxTransport, PreparedRequest
from rest_harness.utils.pagination import link_from_headers

if TYPE_CHECKING:
    from rest_harness.credentials import Credentials
    from rest_harness.interfaces import JsonCodec, Transport
    from rest_harness.targets import RequestTarget
    from rest_harness.transport import ApiResponse

logger = logging.getLogger(__name__)

# Status codes that mean "the server rejected these credentials"
AUTH_REJECTED_STATUS_CODES = frozenset({400, 401, 403})


class BaseApiClient(ABC):
    """Shared request, login and pagination mechanics for API bindings.

    Attributes:
        base_uri: Base URI that relative targets resolve against.
        token: Current session token, or None before login.
        config: The client configuration.

    """

    def __init__(
        self,
        base_uri: str | AbsoluteURL,
        *,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        codec: JsonCodec | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_uri: Absolute base URI of the API.
            config: Client configuration. Defaults to ClientConfig().
            transport: Transport to own. Defaults to an HttpxTransport built from config.
            codec: JSON codec. Defaults to the standard library codec.

        Raises:
            ConfigurationError: If base_uri is not an absolute http(s) URL.

        """
        target = as_target(base_uri)
        if not isinstance(target, AbsoluteURL):
            raise ConfigurationError(f"Base URI must be an absolute URL, got {base_uri!r}")

        self._base_uri = target
        self._config = config or ClientConfig()
        self._transport = transport or HttpxTransport(self._config)
        self._codec = codec or DEFAULT_CODEC
        self._token: SessionToken | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._closed = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def base_uri(self) -> AbsoluteURL:
        """Base URI that relative targets are resolved against."""
        return self._base_uri

    @property
    def token(self) -> SessionToken | None:
        """Current session token, set by login."""
        return self._token

    @property
    def config(self) -> ClientConfig:
        """The immutable client configuration."""
        return self._config

    @property
    def is_authenticated(self) -> bool:
        """Check if a session token is held."""
        return self._token is not None

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, credentials: Credentials) -> None:
        """Authenticate and store the resulting session token.

        A successful login replaces any previously held token; NoAuth
        clears it. If login fails the previous token is kept. The password
        exchange itself is sent without the previous token. NoAuth and
        ApiKey never touch the network.

        Args:
            credentials: One of NoAuth, ApiKey, UserPass, UserPassTwoFactor.

        Raises:
            AuthError: If the server answered without a usable token.
            TransportError: If the login request could not be sent.

        """
        if isinstance(credentials, NoAuth):
            self._token = None
            logger.info("Using anonymous access for %s", self._base_uri)
            return

        if isinstance(credentials, ApiKey):
            token = self.token_from_api_key(credentials)
        elif isinstance(credentials, (UserPass, UserPassTwoFactor)):
            previous, self._token = self._token, None
            try:
                token = self.exchange_password(credentials)
            except BaseException:
                self._token = previous
                raise
        else:
            raise TypeError(f"Unsupported credentials type: {type(credentials).__name__}")

        self._token = token
        logger.info("Logged in to %s (%s)", self._base_uri, type(credentials).__name__)

    def token_from_api_key(self, credentials: ApiKey) -> SessionToken:
        """Build a session token from an API key. No network call."""
        return SessionToken(credentials.token, TokenKind.PERSONAL_ACCESS)

    def exchange_password(self, credentials: UserPass | UserPassTwoFactor) -> SessionToken:
        """Exchange a username and password for a session token.

        Bindings with a password login override this.

        Raises:
            AuthError: Always, in this default implementation.

        """
        raise AuthError(f"{type(self).__name__} does not support username/password login")

    def login_request(self, target: str | RequestTarget, params: Mapping[str, Any]) -> Any:
        """POST login parameters and return the decoded JSON answer.

        Helper for `exchange_password` implementations. A 400, 401 or 403
        answer becomes an AuthError rather than an HTTPStatusError.

        """
        try:
            return self.request_json("POST", target, JsonParams(params))
        except HTTPStatusError as e:
            if e.status_code in AUTH_REJECTED_STATUS_CODES:
                raise AuthError(
                    f"Login rejected: {e.message}", response_data=e.response_data
                ) from e
            raise

    @abstractmethod
    def prepare_request(self, request: PreparedRequest) -> None:
        """Attach authentication to an outgoing request.

        Called once per request, after the target is resolved and the body
        encoded, right before dispatch.

        """

    # =========================================================================
    # Requests
    # =========================================================================

    def request(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
    ) -> ApiResponse:
        """Make an API request and return the raw response.

        The status code is not checked.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            target: Path relative to the base URI, or an absolute URL.
            body: JsonParams or mapping (sent as JSON), str or bytes (sent as is).

        Returns:
            The response from the transport.

        Raises:
            ClientError: If the client has been closed.
            ConfigurationError: If the target cannot be resolved.
            TransportError: If the round trip fails.

        """
        self._ensure_open()
        url = resolve(self._base_uri, target)
        prepared = PreparedRequest(method=method.upper(), url=url)
        self._encode_body(prepared, body)
        self.prepare_request(prepared)

        return self._transport.send(prepared.method, prepared.url.url, prepared.headers, prepared.body)

    def _encode_body(self, prepared: PreparedRequest, body: Any) -> None:
        if body is None:
            return
        if isinstance(body, Mapping):
            params = body if isinstance(body, JsonParams) else JsonParams(body)
            prepared.set_json_body(params.serialize(self._codec))
        elif isinstance(body, str):
            prepared.body = body.encode("utf-8")
        elif isinstance(body, bytes):
            prepared.body = body
        else:
            raise TypeError(f"Unsupported request body type: {type(body).__name__}")

    def response_to_json(self, response: ApiResponse) -> Any:
        """Decode a response body to JSON.

        An empty body decodes to an empty list.

        Raises:
            DecodeError: If the body is not valid JSON.
            HTTPStatusError: If raise_for_status is set and the status is >= 400.

        """
        if self._config.raise_for_status and response.is_error:
            try:
                error_data = decode_json_body(response.content, self._codec)
            except DecodeError:
                error_data = response.text
            raise exception_from_response(
                status_code=response.status_code,
                response_data=error_data,
                headers=response.headers,
                url=response.url,
            )
        return decode_json_body(response.content, self._codec)

    def request_json(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
    ) -> Any:
        """Make an API request and decode the response as JSON."""
        response = self.request(method, target, body)
        return self.response_to_json(response)

    # =========================================================================
    # Pagination
    # =========================================================================

    def next_page_target(self, response: ApiResponse) -> AbsoluteURL | None:
        """Find the URL of the next page from the response's Link header.

        A missing header, a header without a "next" relation or an empty
        "next" URL means there is no next page. A relative "next" URL is
        resolved against the URL of the response it came with.

        Raises:
            ParseError: If the Link header is malformed.

        """
        link = link_from_headers(response.headers)
        if link is None or link.next is None:
            return None
        if not link.next.strip():
            logger.warning("Ignoring empty next link from %s", response.url)
            return None
        return AbsoluteURL(urljoin(response.url, link.next.strip()))

    def iter_pages(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
        max_pages: int | None = None,
    ) -> Iterator[Any]:
        """Lazily fetch pages one at a time, yielding each decoded payload.

        Pages already yielded stay with the caller if a later page fails.
        Pagination stops when a next link points back at a page already
        fetched.

        Args:
            method: HTTP method, repeated for every page.
            target: First page target.
            body: Request body, repeated for every page.
            max_pages: Maximum pages to fetch (defaults to config.max_pages).

        Yields:
            Decoded JSON payload of each page, in server order.

        """
        limit = max_pages if max_pages is not None else self._config.max_pages
        current: str | RequestTarget | None = target
        visited: set[str] = set()
        fetched = 0

        while current is not None:
            response = self.request(method, current, body)
            page = self.response_to_json(response)
            visited.add(response.url)
            fetched += 1
            yield page

            if limit is not None and fetched >= limit:
                logger.debug("Stopping pagination after %d page(s) (limit reached)", fetched)
                return

            current = self.next_page_target(response)
            if current is not None and current.url in visited:
                logger.warning("Next link %s was already fetched; stopping pagination", current)
                return
            if current is not None:
                logger.debug("Fetching page %d: %s", fetched + 1, current)

    def autopaginate(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
        max_pages: int | None = None,
    ) -> list[Any]:
        """Fetch every page of a paginated collection.

        Pages are requested strictly one after another. If any page fails
        the whole call fails and no partial result is returned; use
        iter_pages to keep the pages fetched before a failure.

        Returns:
            List of decoded page payloads, in server order.

        """
        pages = list(self.iter_pages(method, target, body, max_pages))
        logger.debug("Autopagination fetched %d page(s)", len(pages))
        return pages

    # =========================================================================
    # Pending requests
    # =========================================================================

    def begin_request(
        self,
        method: str,
        target: str | RequestTarget,
        body: Any = None,
    ) -> Future[ApiResponse]:
        """Start a request in the background and return a pending handle.

        Requests run one at a time on a single worker owned by this client,
        so the caller can overlap its own work with the round trip.

        Raises:
            ClientError: If the client has been closed.

        """
        self._ensure_open()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix=f"{type(self).__name__}-request"
            )
        return self._executor.submit(self.request, method, target, body)

    def resolve_response(self, pending: Future[ApiResponse]) -> ApiResponse:
        """Block until a pending request completes and return its response."""
        return pending.result()

    def resolve_json(self, pending: Future[ApiResponse]) -> Any:
        """Block until a pending request completes and decode it as JSON."""
        return self.response_to_json(pending.result())

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Wait for pending requests, then release the transport's connections.

        Closing twice is harmless. Any request made afterwards raises ClientError.

        """
        if self._closed:
            return
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._closed = True
        self._transport.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientError(f"{type(self).__name__} is closed")

    def __enter__(self) -> BaseApiClient:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager and close the client."""
        self.close()

    def __repr__(self) -> str:
        """Return a string representation of the client."""
        auth_status = "authenticated" if self.is_authenticated else "anonymous"
        return f"{type(self).__name__}(base_uri={self._base_uri.url!r}, {auth_status})"
