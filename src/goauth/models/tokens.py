"""Token endpoint and introspection payloads."""

from typing import Optional

from pydantic import Field

from goauth.models.base import GoAuthBaseModel

BEARER_TOKEN_TYPE = "Bearer"


class AccessTokenInfo(GoAuthBaseModel):
    """Access token value and lifetime."""

    access_token: str = Field(..., description="JWT access token")
    expires_in: int = Field(default=0, description="Lifetime in seconds")


class RefreshTokenInfo(GoAuthBaseModel):
    """Refresh token value and lifetime."""

    refresh_token: str = Field(..., description="Refresh token")
    expires_in: int = Field(default=0, description="Lifetime in seconds")


class TokenResponse(GoAuthBaseModel):
    """Result of the authorization_code and refresh_token grants.

    Attributes:
        access_token: Access token and its lifetime.
        refresh_token: Refresh token and its lifetime.
        token_type: Token type, expected to be "Bearer".
        scope: Granted scopes, space separated.
    """

    access_token: AccessTokenInfo
    refresh_token: RefreshTokenInfo
    token_type: str = Field(default=BEARER_TOKEN_TYPE)
    scope: str = Field(default="")


class ClientCredentialsTokenResponse(GoAuthBaseModel):
    """Result of the client_credentials grant.

    There is no refresh token: the grant carries no user context and a new
    token is simply requested again.
    """

    access_token: str = Field(..., description="JWT access token")
    expires_in: int = Field(default=0, description="Lifetime in seconds")
    token_type: str = Field(default=BEARER_TOKEN_TYPE)
    scope: str = Field(default="")


class IntrospectionResponse(GoAuthBaseModel):
    """Token metadata from the introspection endpoint (RFC 7662).

    Optional members are None when the server omits them; inactive tokens
    typically carry ``active`` only.
    """

    active: bool = Field(..., description="Whether the token is currently active")
    scope: Optional[str] = Field(default=None, description="Space-separated scopes")
    client_id: Optional[str] = Field(default=None, description="Client the token was issued to")
    username: Optional[str] = Field(default=None, description="Resource owner username")
    token_type: Optional[str] = Field(default=None, description="Token type")
    exp: Optional[int] = Field(default=None, description="Expiration timestamp (Unix)")
    sub: Optional[str] = Field(default=None, description="Subject of the token")

    @property
    def scopes(self) -> list[str]:
        """Scopes as a list."""
        if not self.scope:
            return []
        return self.scope.split()
