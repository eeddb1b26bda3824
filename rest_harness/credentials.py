"""Credentials and session tokens.

Credentials are a closed set of immutable values handed to a client's
`login`. Login turns them into a SessionToken, which carries a kind tag
because vendors encode the same secret in different headers.

Supported Credentials:
    - NoAuth: Anonymous requests
    - ApiKey: A pre-issued token, assigned locally without a network call
    - UserPass: Username and password, exchanged for a token
    - UserPassTwoFactor: Username, password and a one-time code

Example:
    >>> from rest_harness.credentials import ApiKey, UserPass
    >>> client.login(ApiKey("glpat-xxxxxxxx"))
    >>> client.login(UserPass("alice", "s3cret"))

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


def _mask(secret: str) -> str:
    # Show only the first 4 chars for debugging
    return f"{secret[:4]}..." if len(secret) > 4 else "***"


@dataclass(frozen=True)
class NoAuth:
    """No authentication (anonymous requests)."""


@dataclass(frozen=True)
class ApiKey:
    """A pre-issued API token or personal access token."""

    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.token or not self.token.strip():
            raise ValueError("Token cannot be empty")

    def __repr__(self) -> str:
        return f"ApiKey(token={_mask(self.token)!r})"


@dataclass(frozen=True)
class UserPass:
    """Username and password."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UserPassTwoFactor:
    """Username, password and a one-time two-factor code."""

    username: str
    password: str = field(repr=False)
    code: str = field(repr=False)


Credentials = Union[NoAuth, ApiKey, UserPass, UserPassTwoFactor]


class TokenKind(str, Enum):
    """How a session token has to be presented to the server."""

    BEARER = "bearer"
    PERSONAL_ACCESS = "personal_access"
    VAULT = "vault"


@dataclass(frozen=True)
class SessionToken:
    """An opaque secret produced by login, tagged with its kind.

    Attributes:
        value: The secret itself.
        kind: Which header encoding the binding should use.

    """

    value: str
    kind: TokenKind = TokenKind.BEARER

    def __repr__(self) -> str:
        """Return a safe representation without exposing the token."""
        return f"SessionToken(value={_mask(self.value)!r}, kind={self.kind.value!r})"
