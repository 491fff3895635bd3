"""goauth SDK: async OAuth 2.0 client for the goauth authorization server.

Public exports:
    GoAuthClient: Client facade (authorization code, refresh, client credentials,
        introspection, revocation, user lookups, offline JWT verification)
    ClientConfig: Validated, immutable client configuration
    JWTVerifier: Offline verifier for goauth-issued JWTs
    TokenClaims: Verified JWT claims
    APIError: Unified error for failures reported by the server
    GoAuthError: Base class of every SDK error
"""

from goauth.client import GoAuthClient
from goauth.config import ClientConfig
from goauth.errors import (
    APIError,
    ConfigurationError,
    GoAuthError,
    InvalidArgumentError,
    JWTNotConfiguredError,
    ResponseDecodeError,
    TokenVerificationError,
    TransportError,
)
from goauth.models import (
    AccessTokenInfo,
    ClientCredentialsTokenResponse,
    IntrospectionResponse,
    RefreshTokenInfo,
    TokenResponse,
    UserDetail,
    UserInfo,
    UserStatus,
)
from goauth.verifier import JWTVerifier, TokenClaims

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AccessTokenInfo",
    "ClientConfig",
    "ClientCredentialsTokenResponse",
    "ConfigurationError",
    "GoAuthClient",
    "GoAuthError",
    "IntrospectionResponse",
    "InvalidArgumentError",
    "JWTNotConfiguredError",
    "JWTVerifier",
    "RefreshTokenInfo",
    "ResponseDecodeError",
    "TokenClaims",
    "TokenResponse",
    "TokenVerificationError",
    "TransportError",
    "UserDetail",
    "UserInfo",
    "UserStatus",
    "__version__",
]
