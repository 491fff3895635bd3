"""Wire shapes of goauth backend responses.

The backend has used several response formats over its lifetime:

- Generic envelope: ``{"code": 0, "message": "", "data": {...}}``
- Legacy envelope: ``{"success": true, "message": "", "data": {...}}``
- RFC 7807 problem document: ``{"type", "title", "status", "code", "detail"}``
- Legacy numeric error: ``{"code": 1001, "message": "..."}``

These models only describe the shapes; choosing between them is done by
``goauth.decoders`` and ``goauth.normalizer``.
"""

from typing import Generic, Optional, TypeVar

from pydantic import Field

from goauth.models.base import GoAuthBaseModel

DataT = TypeVar("DataT")


class Envelope(GoAuthBaseModel, Generic[DataT]):
    """Generic ``{code, message, data}`` envelope; ``code == 0`` means success."""

    code: int = Field(..., description="Business code, 0 on success")
    message: str = Field(default="", description="Human-readable message")
    data: Optional[DataT] = Field(default=None, description="Payload on success")


class LegacyEnvelope(GoAuthBaseModel, Generic[DataT]):
    """Legacy ``{success, message, data}`` envelope."""

    success: bool = Field(..., description="Whether the call succeeded")
    message: str = Field(default="", description="Human-readable message")
    data: Optional[DataT] = Field(default=None, description="Payload on success")


class ProblemDetails(GoAuthBaseModel):
    """RFC 7807 problem document as returned for 401/403/404 responses.

    Attributes:
        type: Problem type URI, usually "about:blank".
        title: Short error title (e.g. UNAUTHORIZED, USER_NOT_FOUND).
        status: HTTP status code echoed by the server.
        code: Business error code (e.g. INVALID_TOKEN).
        detail: Human-readable description.
    """

    type: Optional[str] = None
    title: Optional[str] = None
    status: Optional[int] = None
    code: Optional[str] = None
    detail: Optional[str] = None


class CodeMessage(GoAuthBaseModel):
    """Legacy numeric error body ``{code, message}``."""

    code: Optional[int] = None
    message: Optional[str] = None
