"""Error normalization for goauth backend responses.

Collapses every error shape the backend has produced into one ``APIError``.
Shapes are tried in order and the first one whose discriminating fields are
populated wins:

1. RFC 7807 problem document (``code``, ``title`` or ``detail`` non-empty)
2. Legacy ``{code: int, message: str}`` (``code != 0`` or ``message`` non-empty)
3. Bare HTTP status

A body that is syntactically compatible with a shape but leaves all of its
discriminating fields empty is not accepted as that shape.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import ValidationError

from goauth.errors import APIError, status_text
from goauth.models.envelope import CodeMessage, ProblemDetails


def _load_json_object(body: bytes) -> Optional[dict[str, Any]]:
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _from_problem_details(status: int, payload: dict[str, Any]) -> Optional[APIError]:
    try:
        problem = ProblemDetails.model_validate(payload)
    except ValidationError:
        return None
    if not (problem.code or problem.title or problem.detail):
        return None
    return APIError(
        status=status,
        code=problem.code or problem.title,
        detail=problem.detail,
        type=problem.type,
        title=problem.title,
    )


def _from_code_message(status: int, payload: dict[str, Any]) -> Optional[APIError]:
    try:
        legacy = CodeMessage.model_validate(payload)
    except ValidationError:
        return None
    code = legacy.code or 0
    message = legacy.message or ""
    if code == 0 and not message:
        return None
    return APIError(status=status, code=str(code), detail=message)


def decode_api_error(status: int, body: bytes) -> APIError:
    """Build the ``APIError`` for a failed response.

    Args:
        status: HTTP status code received.
        body: Raw response body (may be empty or non-JSON).

    Returns:
        APIError with a non-empty ``code``.
    """
    payload = _load_json_object(body)
    if payload is not None:
        error = _from_problem_details(status, payload)
        if error is None:
            error = _from_code_message(status, payload)
        if error is not None:
            return error

    return APIError(
        status=status,
        code=status_text(status) or str(status),
        detail=f"request failed with HTTP {status}",
    )


def new_business_error(status: int, code: Optional[int], message: str) -> APIError:
    """Build the ``APIError`` for a 2xx response carrying a failure envelope.

    Args:
        status: HTTP status actually received (2xx).
        code: Nonzero business code, or None for legacy envelopes without one.
        message: Envelope message.
    """
    return APIError(
        status=status,
        code=str(code) if code is not None else None,
        detail=message,
    )
