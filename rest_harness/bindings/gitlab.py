"""GitLab API binding.

Authentication:
    - ApiKey: personal access token, sent as `PRIVATE-TOKEN`
    - UserPass / UserPassTwoFactor: OAuth2 password grant against
      `<origin>/oauth/token`, token sent as `Authorization: Bearer`

GitLab's password grant has no one-time-code field, so the two-factor
code is ignored. Collections paginate through the Link header.

Example:
    >>> client = GitlabClient("https://gitlab.example.com/api/v4")
    >>> client.login(UserPass("alice", "s3cret"))
    >>> notes = client.autopaginate("GET", "/projects/8/issues/8/notes?per_page=100")

"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rest_harness.client import BaseApiClient
from rest_harness.credentials import SessionToken, TokenKind, UserPass, UserPassTwoFactor
from rest_harness.exceptions import AuthError
from rest_harness.targets import RelativePath
from rest_harness.transport import PreparedRequest

logger = logging.getLogger(__name__)


class OAuthTokenResponse(BaseModel):
    """Answer of GitLab's `/oauth/token` endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str | None = None
    refresh_token: str | None = None
    scope: str | None = None
    created_at: int | None = None


class GitlabClient(BaseApiClient):
    """GitLab REST API client."""

    TOKEN_PATH = "/oauth/token"
    PRIVATE_TOKEN_HEADER = "PRIVATE-TOKEN"

    def prepare_request(self, request: PreparedRequest) -> None:
        request.headers.setdefault("Content-Type", "application/json")
        if self._token is None:
            return
        if self._token.kind is TokenKind.BEARER:
            request.headers["Authorization"] = f"Bearer {self._token.value}"
        else:
            request.headers[self.PRIVATE_TOKEN_HEADER] = self._token.value

    def exchange_password(self, credentials: UserPass | UserPassTwoFactor) -> SessionToken:
        # The token endpoint lives at the instance root, not under /api/v4
        target = self.base_uri.origin + RelativePath(self.TOKEN_PATH)
        payload = self.login_request(
            target,
            {
                "grant_type": "password",
                "username": credentials.username,
                "password": credentials.password,
            },
        )

        try:
            token = OAuthTokenResponse.model_validate(payload)
        except ValidationError as e:
            raise AuthError(
                "Could not log in with given username and password", response_data=payload
            ) from e

        logger.debug("Obtained OAuth token (type=%s)", token.token_type)
        return SessionToken(token.access_token, TokenKind.BEARER)
