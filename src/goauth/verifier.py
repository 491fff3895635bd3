"""Offline JWT verification for goauth-issued tokens.

goauth signs access and refresh tokens with separate HMAC secrets. When a
client is configured with those secrets it can verify tokens locally,
without an introspection round trip, using joserfc.

Verification checks the signature, the registered time claims (``exp``,
``nbf``, ``iat``) and, when the token carries a ``token_type`` claim, that
an access token is not accepted where a refresh token is expected and vice
versa.
"""

from __future__ import annotations

from typing import Any, Optional

from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey
from pydantic import Field, ValidationError

from goauth.errors import InvalidArgumentError, JWTNotConfiguredError, TokenVerificationError
from goauth.models.base import GoAuthBaseModel
from goauth.observability import get_logger

logger = get_logger(__name__)

HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

CLOCK_LEEWAY_SECONDS = 0

_REGISTERED_CLAIMS = frozenset({"sub", "iss", "aud", "exp", "iat", "nbf", "jti", "token_type"})


class TokenClaims(GoAuthBaseModel):
    """Verified claims of a goauth JWT.

    Attributes:
        sub: Subject (user identifier, or client id for client_credentials tokens).
        iss: Issuer.
        aud: Audience, a string or list of strings.
        exp: Expiration timestamp (Unix).
        iat: Issued-at timestamp (Unix).
        nbf: Not-before timestamp (Unix).
        jti: Token identifier.
        token_type: "access" or "refresh" when the issuer sets it.
        extra: Any remaining non-registered claims (e.g. scope, client_id).
    """

    sub: Optional[str] = None
    iss: Optional[str] = None
    aud: Optional[Any] = None
    exp: Optional[int] = None
    iat: Optional[int] = None
    nbf: Optional[int] = None
    jti: Optional[str] = None
    token_type: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> TokenClaims:
        registered = {k: v for k, v in claims.items() if k in _REGISTERED_CLAIMS}
        extra = {k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS}
        nested = extra.pop("extra", None)
        if isinstance(nested, dict):
            extra = {**nested, **extra}
        return cls(**registered, extra=extra)


class JWTVerifier:
    """Verifies goauth access and refresh tokens with shared HMAC secrets.

    At least one secret is required. Verifying a token kind whose secret was
    not supplied raises ``JWTNotConfiguredError``.

    Example:
        >>> verifier = JWTVerifier(access_token_secret="...32+ byte secret...")
        >>> claims = verifier.parse_access_token(token)
        >>> claims.sub
    """

    def __init__(
        self,
        access_token_secret: Optional[str] = None,
        refresh_token_secret: Optional[str] = None,
        *,
        leeway: int = CLOCK_LEEWAY_SECONDS,
    ) -> None:
        """Initialize the verifier.

        Args:
            access_token_secret: Secret used to sign access tokens.
            refresh_token_secret: Secret used to sign refresh tokens.
            leeway: Allowed clock skew in seconds for time claims.

        Raises:
            ValueError: Neither secret was provided.
        """
        if not access_token_secret and not refresh_token_secret:
            raise ValueError("at least one of access_token_secret or refresh_token_secret is required")
        self._access_key = OctKey.import_key(access_token_secret) if access_token_secret else None
        self._refresh_key = (
            OctKey.import_key(refresh_token_secret) if refresh_token_secret else None
        )
        self._registry = jose_jwt.JWTClaimsRegistry(leeway=leeway)

    @property
    def has_access_secret(self) -> bool:
        return self._access_key is not None

    @property
    def has_refresh_secret(self) -> bool:
        return self._refresh_key is not None

    def parse_access_token(self, token: str) -> TokenClaims:
        """Verify an access token and return its claims.

        Raises:
            InvalidArgumentError: token is empty.
            JWTNotConfiguredError: no access token secret was configured.
            TokenVerificationError: token is malformed, forged, expired or not an access token.
        """
        if not token:
            raise InvalidArgumentError("token")
        if self._access_key is None:
            raise JWTNotConfiguredError("access_token_secret")
        return self._verify(token, self._access_key, ACCESS_TOKEN_TYPE)

    def parse_refresh_token(self, token: str) -> TokenClaims:
        """Verify a refresh token and return its claims.

        Raises:
            InvalidArgumentError: token is empty.
            JWTNotConfiguredError: no refresh token secret was configured.
            TokenVerificationError: token is malformed, forged, expired or not a refresh token.
        """
        if not token:
            raise InvalidArgumentError("token")
        if self._refresh_key is None:
            raise JWTNotConfiguredError("refresh_token_secret")
        return self._verify(token, self._refresh_key, REFRESH_TOKEN_TYPE)

    def validate_token(self, token: str) -> None:
        """Check that ``token`` is a valid access token; raise otherwise."""
        self.parse_access_token(token)

    def _verify(self, token: str, key: OctKey, expected_type: str) -> TokenClaims:
        try:
            decoded = jose_jwt.decode(token, key, algorithms=HMAC_ALGORITHMS)
            self._registry.validate(decoded.claims)
            claims = TokenClaims.from_claims(dict(decoded.claims))
        except JoseError as exc:
            logger.info(
                "goauth.jwt.rejected",
                expected_type=expected_type,
                error=exc.error,
            )
            raise TokenVerificationError(str(exc), details={"error": exc.error}) from exc
        except ValidationError as exc:
            raise TokenVerificationError(f"unexpected claim types: {exc}") from exc
        except ValueError as exc:
            raise TokenVerificationError(f"malformed token: {exc}") from exc

        if claims.token_type and claims.token_type != expected_type:
            raise TokenVerificationError(
                f"expected {expected_type} token, got {claims.token_type}",
                details={"token_type": claims.token_type},
            )
        return claims
