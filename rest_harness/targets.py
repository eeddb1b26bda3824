"""Request targets and their resolution against a base URI.

A request target is either a path relative to the client's base URI or a
self-contained absolute URL. Keeping the two apart in the type means a
fully-qualified pagination URL is never glued onto the base by accident.

Example:
    >>> base = AbsoluteURL("https://gitlab.example.com/api/v4")
    >>> resolve(base, RelativePath("/projects")).url
    'https://gitlab.example.com/api/v4/projects'
    >>> (base + RelativePath("users")).url
    'https://gitlab.example.com/api/v4/users'

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from urllib.parse import urlsplit

import httpx

from rest_harness.exceptions import ConfigurationError, InvalidTargetError

ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class RelativePath:
    """A path that lives under the client's base URI.

    Attributes:
        path: The path as given, optionally with a leading slash and a query string.

    """

    path: str

    def __add__(self, other: object) -> RequestTarget:
        raise ConfigurationError(
            f"Cannot join onto relative path {self.path!r}; only an absolute URL can be a base"
        )

    def stripped(self) -> str:
        """Return the path with at most one leading slash removed.

        Raises:
            InvalidTargetError: If nothing is left after stripping.

        """
        path = self.path[1:] if self.path.startswith("/") else self.path
        if not path:
            raise InvalidTargetError(self.path)
        return path


@dataclass(frozen=True)
class AbsoluteURL:
    """A fully-qualified http(s) URL.

    Attributes:
        url: The URL string, kept exactly as given.

    """

    url: str

    def __post_init__(self) -> None:
        parts = urlsplit(self.url)
        if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
            raise ConfigurationError(
                f"Invalid absolute URL: {self.url!r} (must start with http:// or https://)"
            )
        try:
            httpx.URL(self.url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid absolute URL: {self.url!r} ({e})") from e

    def __add__(self, other: object) -> AbsoluteURL:
        if isinstance(other, str):
            other = as_target(other)
        if isinstance(other, AbsoluteURL):
            raise ConfigurationError(f"Cannot join absolute URL {other.url!r} onto {self.url!r}")
        if not isinstance(other, RelativePath):
            return NotImplemented

        parts = urlsplit(self.url)
        if parts.query or parts.fragment:
            raise ConfigurationError(
                f"Base URI {self.url!r} must not carry a query string or fragment"
            )

        base = self.url.rstrip("/") + "/"
        return AbsoluteURL(base + other.stripped())

    def __str__(self) -> str:
        return self.url

    @property
    def origin(self) -> AbsoluteURL:
        """Scheme, host and port only, with any base path dropped."""
        parts = urlsplit(self.url)
        return AbsoluteURL(f"{parts.scheme}://{parts.netloc}")

    def to_httpx(self) -> httpx.URL:
        """Return the URL as an httpx.URL."""
        return httpx.URL(self.url)


RequestTarget = Union[RelativePath, AbsoluteURL]


def as_target(value: str | RequestTarget) -> RequestTarget:
    """Classify a plain string as an absolute URL or a relative path.

    Anything with both a scheme and a host is absolute.

    Example:
        >>> as_target("https://h/x?page=2")
        AbsoluteURL(url='https://h/x?page=2')
        >>> as_target("/v1/items")
        RelativePath(path='/v1/items')

    """
    if isinstance(value, (RelativePath, AbsoluteURL)):
        return value
    parts = urlsplit(value)
    if parts.scheme and parts.netloc:
        return AbsoluteURL(value)
    return RelativePath(value)


def resolve(base: str | RequestTarget, target: str | RequestTarget) -> AbsoluteURL:
    """Turn a request target into an absolute URL.

    An absolute target is returned unchanged and the base is never
    consulted, even when the hosts differ. A relative target has at most
    one leading slash stripped and is appended to the base, which gets
    exactly one trailing slash.

    Args:
        base: The client's base URI. Must be absolute.
        target: The path or URL to request.

    Returns:
        The absolute URL to send the request to.

    Raises:
        ConfigurationError: If the base is not an absolute URL.
        InvalidTargetError: If a relative target is empty.

    """
    target = as_target(target)
    if isinstance(target, AbsoluteURL):
        return target

    base = as_target(base)
    if not isinstance(base, AbsoluteURL):
        raise ConfigurationError(f"Base URI {base.path!r} is not an absolute URL")
    return base + target
