"""Pydantic models for goauth payloads."""

from goauth.models.base import GoAuthBaseModel
from goauth.models.envelope import CodeMessage, Envelope, LegacyEnvelope, ProblemDetails
from goauth.models.tokens import (
    AccessTokenInfo,
    ClientCredentialsTokenResponse,
    IntrospectionResponse,
    RefreshTokenInfo,
    TokenResponse,
)
from goauth.models.users import UserDetail, UserInfo, UserStatus

__all__ = [
    "AccessTokenInfo",
    "ClientCredentialsTokenResponse",
    "CodeMessage",
    "Envelope",
    "GoAuthBaseModel",
    "IntrospectionResponse",
    "LegacyEnvelope",
    "ProblemDetails",
    "RefreshTokenInfo",
    "TokenResponse",
    "UserDetail",
    "UserInfo",
    "UserStatus",
]
