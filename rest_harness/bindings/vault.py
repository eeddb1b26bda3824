"""HashiCorp Vault API binding.

Authentication:
    - ApiKey: an existing Vault token
    - UserPass / UserPassTwoFactor: LDAP login at
      `<base>/v1/auth/<mount>/login/<username>`, the two-factor code is
      sent as `passcode`

Tokens travel in the `X-Vault-Token` header. Vault lists are not paged,
so autopagination always stops after the first response.

"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rest_harness.client import BaseApiClient
from rest_harness.credentials import (
    ApiKey,
    SessionToken,
    TokenKind,
    UserPass,
    UserPassTwoFactor,
)
from rest_harness.exceptions import AuthError
from rest_harness.targets import AbsoluteURL, RelativePath
from rest_harness.transport import ApiResponse, PreparedRequest


class VaultAuth(BaseModel):
    """The `auth` block of a Vault login response."""

    model_config = ConfigDict(extra="ignore")

    client_token: str = Field(min_length=1)
    accessor: str | None = None
    policies: list[str] = Field(default_factory=list)
    lease_duration: int | None = None
    renewable: bool | None = None


class VaultLoginResponse(BaseModel):
    """Answer of a Vault auth method's login endpoint."""

    model_config = ConfigDict(extra="ignore")

    auth: VaultAuth


class VaultClient(BaseApiClient):
    """Vault HTTP API client.

    Args:
        base_uri: Vault address, e.g. https://vault.example.com:8200
        auth_mount: Path the LDAP auth method is mounted at.

    """

    TOKEN_HEADER = "X-Vault-Token"

    def __init__(
        self,
        base_uri: str | AbsoluteURL,
        *,
        auth_mount: str = "ldap",
        **kwargs: Any,
    ) -> None:
        super().__init__(base_uri, **kwargs)
        self.auth_mount = auth_mount.strip("/")

    def prepare_request(self, request: PreparedRequest) -> None:
        request.headers.setdefault("Content-Type", "application/json")
        if self._token is not None:
            request.headers[self.TOKEN_HEADER] = self._token.value

    def token_from_api_key(self, credentials: ApiKey) -> SessionToken:
        return SessionToken(credentials.token, TokenKind.VAULT)

    def exchange_password(self, credentials: UserPass | UserPassTwoFactor) -> SessionToken:
        params = {"password": credentials.password}
        if isinstance(credentials, UserPassTwoFactor):
            params["passcode"] = credentials.code

        target = RelativePath(
            f"/v1/auth/{self.auth_mount}/login/{quote(credentials.username, safe='')}"
        )
        payload = self.login_request(target, params)

        try:
            login = VaultLoginResponse.model_validate(payload)
        except ValidationError as e:
            raise AuthError("Could not retrieve auth token", response_data=payload) from e

        return SessionToken(login.auth.client_token, TokenKind.VAULT)

    def next_page_target(self, response: ApiResponse) -> AbsoluteURL | None:
        return None
