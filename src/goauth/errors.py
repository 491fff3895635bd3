"""goauth SDK Error Taxonomy.

This module defines the error hierarchy for the goauth SDK. Every failure
the client surfaces is a ``GoAuthError`` subclass so callers can catch one
base type, or branch on the specific subclass:

- ``ConfigurationError``: invalid client configuration at construction time
- ``InvalidArgumentError``: empty required argument (no request is sent)
- ``TransportError``: network or connection failure
- ``ResponseDecodeError``: 2xx response whose body does not match the expected shape
- ``APIError``: failure reported by the authorization server (HTTP or business level)
- ``JWTNotConfiguredError``: offline verification without the required secret
- ``TokenVerificationError``: token rejected by offline verification
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any


def status_text(status: int) -> str:
    """Return the canonical reason phrase for an HTTP status, or "" if unknown."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


class GoAuthError(Exception):
    """Base exception for all goauth SDK errors.

    Attributes:
        code: Error code following the goauth:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(GoAuthError, ValueError):
    """Raised when the client configuration is missing or malformed.

    Attributes:
        field: Name of the offending configuration field, if known
    """

    def __init__(
        self, reason: str, field: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        extra = {"field": field} if field else {}
        super().__init__(
            code="goauth:config/invalid",
            message=f"Invalid configuration: {reason}",
            details={**extra, **(details or {})},
        )
        self.field = field
        self.reason = reason


class InvalidArgumentError(GoAuthError, ValueError):
    """Raised when a required call argument is empty.

    No request is sent when this error is raised.
    """

    def __init__(self, argument: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="goauth:input/invalid_argument",
            message=f"{argument} is required",
            details={"argument": argument, **(details or {})},
        )
        self.argument = argument


class TransportError(GoAuthError):
    """Raised when the HTTP exchange with the authorization server fails.

    Wraps the underlying ``httpx.HTTPError``; the original exception is
    available as ``cause`` and as ``__cause__``.

    Attributes:
        method: HTTP method of the failed request
        url: URL of the failed request
        cause: Original exception
    """

    def __init__(
        self,
        method: str,
        url: str,
        cause: Exception,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="goauth:transport/request_failed",
            message=f"{method} {url} failed: {cause}",
            details={"method": method, "url": url, **(details or {})},
        )
        self.method = method
        self.url = url
        self.cause = cause


class ResponseDecodeError(GoAuthError):
    """Raised when a successful (2xx) response cannot be decoded.

    This indicates a library defect or an incompatible backend, not a
    business failure. The body preview is bounded so that large bodies do
    not end up in logs verbatim.

    Attributes:
        status_code: HTTP status of the response
        body_preview: Truncated response body
    """

    def __init__(
        self,
        reason: str,
        status_code: int,
        body_preview: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="goauth:decode/invalid_response",
            message=f"Cannot decode response (HTTP {status_code}): {reason} (body: {body_preview})",
            details={
                "status_code": status_code,
                "body_preview": body_preview,
                **(details or {}),
            },
        )
        self.reason = reason
        self.status_code = status_code
        self.body_preview = body_preview


class APIError(GoAuthError):
    """Unified error for failures reported by the authorization server.

    Built from an RFC 7807 problem document, a legacy ``{code, message}``
    body, a bare HTTP status, or a 2xx envelope with a nonzero business code.
    ``code`` is resolved at construction with the priority
    explicit code -> title -> HTTP status phrase -> numeric status,
    so it is never empty.

    Attributes:
        status: HTTP status code received
        code: Business or protocol error identifier
        detail: Human-readable description
        type: RFC 7807 problem type URI (problem documents only)
        title: RFC 7807 title (problem documents only)
    """

    def __init__(
        self,
        status: int,
        code: str | None = None,
        detail: str | None = None,
        type: str | None = None,
        title: str | None = None,
    ) -> None:
        resolved = code or title or status_text(status) or str(status)
        detail = detail or ""
        message = f"{resolved}: {detail}" if detail else resolved
        super().__init__(
            code=resolved,
            message=message,
            details={"status": status, "type": type, "title": title},
        )
        self.status = status
        self.detail = detail
        self.type = type
        self.title = title

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "code": self.code,
            "detail": self.detail,
            "type": self.type,
            "title": self.title,
        }

    def __repr__(self) -> str:
        return f"APIError(status={self.status}, code={self.code!r}, detail={self.detail!r})"


class JWTNotConfiguredError(GoAuthError):
    """Raised when offline verification is requested without the required secret.

    Distinct from ``TokenVerificationError``: the token was never looked at.

    Attributes:
        secret: Name of the missing secret setting
    """

    def __init__(self, secret: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="goauth:jwt/not_configured",
            message=f"JWT verification not configured: {secret} is required",
            details={"secret": secret, **(details or {})},
        )
        self.secret = secret


class TokenVerificationError(GoAuthError):
    """Raised when a token fails offline verification.

    Covers malformed tokens, bad signatures, expired tokens and tokens of
    the wrong type (access vs refresh).
    """

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="goauth:jwt/invalid_token",
            message=f"Token verification failed: {reason}",
            details=details or {},
        )
        self.reason = reason
