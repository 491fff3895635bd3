"""Unit tests for offline JWT verification."""

import pytest
from joserfc import jwt as jose_jwt
from joserfc.jwk import OctKey

from goauth.errors import InvalidArgumentError, JWTNotConfiguredError, TokenVerificationError
from goauth.verifier import JWTVerifier, TokenClaims
from tests.factories import ACCESS_TOKEN_SECRET, REFRESH_TOKEN_SECRET, mint_token


@pytest.fixture
def verifier() -> JWTVerifier:
    return JWTVerifier(
        access_token_secret=ACCESS_TOKEN_SECRET,
        refresh_token_secret=REFRESH_TOKEN_SECRET,
    )


def test_requires_at_least_one_secret() -> None:
    with pytest.raises(ValueError):
        JWTVerifier()


def test_parse_access_token(verifier: JWTVerifier) -> None:
    token = mint_token(ACCESS_TOKEN_SECRET, scope="profile", client_id="c1")

    claims = verifier.parse_access_token(token)

    assert isinstance(claims, TokenClaims)
    assert claims.sub == "user-123"
    assert claims.iss == "goauth"
    assert claims.token_type == "access"
    assert claims.extra == {"scope": "profile", "client_id": "c1"}


def test_nested_extra_claim_flattened(verifier: JWTVerifier) -> None:
    token = mint_token(ACCESS_TOKEN_SECRET, extra={"role": "admin"})

    claims = verifier.parse_access_token(token)

    assert claims.extra == {"role": "admin"}


def test_parse_refresh_token(verifier: JWTVerifier) -> None:
    token = mint_token(REFRESH_TOKEN_SECRET, token_type="refresh")

    claims = verifier.parse_refresh_token(token)

    assert claims.token_type == "refresh"


def test_token_without_type_claim_accepted(verifier: JWTVerifier) -> None:
    token = mint_token(ACCESS_TOKEN_SECRET, token_type=None)

    assert verifier.parse_access_token(token).token_type is None


def test_wrong_secret_rejected(verifier: JWTVerifier) -> None:
    token = mint_token(REFRESH_TOKEN_SECRET, token_type="access")

    with pytest.raises(TokenVerificationError):
        verifier.parse_access_token(token)


def test_refresh_token_rejected_as_access_token() -> None:
    shared = "shared-secret-0123456789abcdef012345"
    verifier = JWTVerifier(access_token_secret=shared, refresh_token_secret=shared)
    token = mint_token(shared, token_type="refresh")

    with pytest.raises(TokenVerificationError) as exc_info:
        verifier.parse_access_token(token)

    assert "expected access token" in str(exc_info.value)


def test_expired_token_rejected(verifier: JWTVerifier) -> None:
    token = mint_token(ACCESS_TOKEN_SECRET, expires_in=-3600)

    with pytest.raises(TokenVerificationError):
        verifier.parse_access_token(token)


def test_malformed_token_rejected(verifier: JWTVerifier) -> None:
    with pytest.raises(TokenVerificationError):
        verifier.parse_access_token("not.a.valid.jwt")


def test_tampered_signature_rejected(verifier: JWTVerifier) -> None:
    token = jose_jwt.encode(
        {"alg": "HS256"}, {"sub": "x"}, OctKey.import_key(ACCESS_TOKEN_SECRET)
    )
    tampered = token[:-2] + ("AA" if not token.endswith("AA") else "BB")

    with pytest.raises(TokenVerificationError):
        verifier.parse_access_token(tampered)


def test_empty_token_is_invalid_argument(verifier: JWTVerifier) -> None:
    with pytest.raises(InvalidArgumentError):
        verifier.parse_access_token("")


def test_missing_access_secret_is_not_configured() -> None:
    verifier = JWTVerifier(refresh_token_secret=REFRESH_TOKEN_SECRET)

    with pytest.raises(JWTNotConfiguredError) as exc_info:
        verifier.parse_access_token(mint_token(ACCESS_TOKEN_SECRET))

    assert exc_info.value.secret == "access_token_secret"


def test_missing_refresh_secret_is_not_configured() -> None:
    verifier = JWTVerifier(access_token_secret=ACCESS_TOKEN_SECRET)

    with pytest.raises(JWTNotConfiguredError):
        verifier.parse_refresh_token(mint_token(REFRESH_TOKEN_SECRET, token_type="refresh"))


def test_validate_token(verifier: JWTVerifier) -> None:
    assert verifier.validate_token(mint_token(ACCESS_TOKEN_SECRET)) is None

    with pytest.raises(TokenVerificationError):
        verifier.validate_token(mint_token(ACCESS_TOKEN_SECRET, expires_in=-60))


def test_configured_secrets_reported() -> None:
    access_only = JWTVerifier(access_token_secret=ACCESS_TOKEN_SECRET)
    refresh_only = JWTVerifier(refresh_token_secret=REFRESH_TOKEN_SECRET)

    assert (access_only.has_access_secret, access_only.has_refresh_secret) == (True, False)
    assert (refresh_only.has_access_secret, refresh_only.has_refresh_secret) == (False, True)
