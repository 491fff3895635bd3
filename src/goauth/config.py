"""Client configuration for the goauth SDK.

``ClientConfig`` is validated and normalized once, at construction, and is
immutable afterwards so a single client can be shared across tasks.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ConfigDict, Field, ValidationError, field_validator

from goauth.errors import ConfigurationError
from goauth.models.base import GoAuthBaseModel

REQUIRED_FIELDS = (
    "frontend_base_url",
    "backend_base_url",
    "client_id",
    "client_secret",
    "redirect_uri",
)


def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


class ClientConfig(GoAuthBaseModel):
    """Settings for a ``GoAuthClient``.

    Attributes:
        frontend_base_url: Base URL of the portal hosting the consent page,
            e.g. https://portal.example.com. ``/oauth/authorize`` is appended.
        backend_base_url: Base URL of the goauth API, e.g. https://auth.example.com.
            ``/api/v1/...`` paths are appended.
        client_id: OAuth client identifier.
        client_secret: OAuth client secret.
        redirect_uri: Callback URL registered for the client.
        transport: Optional httpx transport replacing the network layer
            (e.g. ``httpx.MockTransport`` in tests, or a proxy-aware transport).
        access_token_secret: HMAC secret enabling offline access-token verification.
        refresh_token_secret: HMAC secret enabling offline refresh-token verification.
        timeout: Optional per-request timeout in seconds. None leaves timing
            entirely to the caller (e.g. ``asyncio.timeout``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    frontend_base_url: str
    backend_base_url: str
    client_id: str
    client_secret: str = Field(..., repr=False)
    redirect_uri: str
    transport: Optional[httpx.AsyncBaseTransport] = Field(default=None, repr=False)
    access_token_secret: Optional[str] = Field(default=None, repr=False)
    refresh_token_secret: Optional[str] = Field(default=None, repr=False)
    timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def _require_non_empty(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("value is required")
        return value

    @field_validator("frontend_base_url", "backend_base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"malformed URL: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("must be an absolute http(s) URL")
        return _strip_trailing_slash(value)

    @field_validator("access_token_secret", "refresh_token_secret")
    @classmethod
    def _empty_secret_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @classmethod
    def create(cls, **kwargs: Any) -> ClientConfig:
        """Build a config, converting pydantic errors into ``ConfigurationError``."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            first = exc.errors()[0]
            loc = first.get("loc") or ()
            field = str(loc[0]) if loc else None
            raise ConfigurationError(
                f"{field}: {first.get('msg')}" if field else str(first.get("msg")),
                field=field,
                details={"errors": len(exc.errors())},
            ) from exc

    @property
    def offline_verification_enabled(self) -> bool:
        return bool(self.access_token_secret or self.refresh_token_secret)
