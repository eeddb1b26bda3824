"""rest-harness - shared mechanics for REST API clients.

This library factors out what every REST API binding repeats: issuing
requests, injecting authentication, resolving relative endpoints against
a base URI, decoding JSON bodies and walking Link-header pagination.

Example:
    >>> from rest_harness import ApiKey
    >>> from rest_harness.bindings import GitlabClient
    >>> with GitlabClient("https://gitlab.example.com/api/v4") as client:
    ...     client.login(ApiKey("glpat-xxxxxxxx"))
    ...     pages = client.autopaginate("GET", "/projects?per_page=100")

"""

from rest_harness.__version__ import __version__
from rest_harness.client import BaseApiClient
from rest_harness.config import ClientConfig
from rest_harness.credentials import (
    ApiKey,
    Credentials,
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
    InvalidTargetError,
    ParseError,
    TransportError,
)
from rest_harness.interfaces import ApiClient, JsonApiClient, JsonCodec, Transport
from rest_harness.serialization import JsonParams
from rest_harness.targets import AbsoluteURL, RelativePath, RequestTarget, as_target, resolve
from rest_harness.transport import ApiResponse, HttpxTransport, PreparedRequest
from rest_harness.utils.pagination import Link, parse_link_header

__all__ = [
    "AbsoluteURL",
    "ApiClient",
    "ApiKey",
    "ApiResponse",
    "AuthError",
    "BaseApiClient",
    "ClientConfig",
    "ClientError",
    "ConfigurationError",
    "Credentials",
    "DecodeError",
    "HTTPStatusError",
    "HttpxTransport",
    "InvalidTargetError",
    "JsonApiClient",
    "JsonCodec",
    "JsonParams",
    "Link",
    "NoAuth",
    "ParseError",
    "PreparedRequest",
    "RelativePath",
    "RequestTarget",
    "SessionToken",
    "TokenKind",
    "Transport",
    "TransportError",
    "UserPass",
    "UserPassTwoFactor",
    "__version__",
    "as_target",
    "parse_link_header",
    "resolve",
]
