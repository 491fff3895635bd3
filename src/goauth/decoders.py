"""Envelope decoders for successful goauth responses.

Every JSON endpoint wraps its payload in an envelope. Two envelope shapes
exist and are told apart by their keys:

- generic: ``{"code": 0, "message": "", "data": {...}}``
- legacy: ``{"success": true, "message": "", "data": {...}}`` (no ``code`` key)

A failure envelope on a 2xx response becomes an ``APIError`` (business
error). A body that fits neither shape is a ``ResponseDecodeError``.
Non-2xx responses never reach these decoders; they go to
``goauth.normalizer.decode_api_error``.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from goauth.errors import ResponseDecodeError
from goauth.models.envelope import Envelope, LegacyEnvelope
from goauth.models.tokens import IntrospectionResponse
from goauth.normalizer import new_business_error
from goauth.transport import RawResponse

ModelT = TypeVar("ModelT", bound=BaseModel)

BODY_PREVIEW_LIMIT = 200
"""Maximum number of body bytes included in decode error messages."""


def truncate_body(body: bytes, limit: int = BODY_PREVIEW_LIMIT) -> str:
    """Return a printable preview of ``body``, cut at ``limit`` bytes.

    Example:
        >>> truncate_body(b"x" * 300)[-3:]
        '...'
        >>> truncate_body(b'{"code":0}')
        '{"code":0}'
    """
    if len(body) <= limit:
        return body.decode("utf-8", errors="replace")
    return body[:limit].decode("utf-8", errors="replace") + "..."


def _decode_error(response: RawResponse, reason: str) -> ResponseDecodeError:
    return ResponseDecodeError(reason, response.status_code, truncate_body(response.body))


def _load_object(response: RawResponse) -> dict[str, Any]:
    try:
        payload = json.loads(response.body)
    except ValueError as exc:
        raise _decode_error(response, f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise _decode_error(response, f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _is_legacy_envelope(payload: dict[str, Any]) -> bool:
    return "code" not in payload and isinstance(payload.get("success"), bool)


def _unwrap(response: RawResponse, payload: dict[str, Any], model: type[ModelT]) -> ModelT:
    # The envelope is checked without the payload type first: a failure
    # envelope may carry a placeholder ``data`` such as {} or "".
    try:
        if _is_legacy_envelope(payload):
            legacy = LegacyEnvelope[Any].model_validate(payload)
            if not legacy.success:
                raise new_business_error(response.status_code, None, legacy.message)
            data = legacy.data
        else:
            envelope = Envelope[Any].model_validate(payload)
            if envelope.code != 0:
                raise new_business_error(response.status_code, envelope.code, envelope.message)
            data = envelope.data
    except ValidationError as exc:
        raise _decode_error(response, f"unexpected envelope: {exc}") from exc

    if data is None:
        raise _decode_error(response, "missing data in successful response")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise _decode_error(response, f"unexpected {model.__name__} payload: {exc}") from exc


def decode_envelope(response: RawResponse, model: type[ModelT]) -> ModelT:
    """Decode a 2xx enveloped response into ``model``.

    Args:
        response: The 2xx response.
        model: Pydantic model of the ``data`` member.

    Returns:
        The validated payload.

    Raises:
        APIError: The envelope reports a business failure.
        ResponseDecodeError: The body does not match either envelope shape.
    """
    return _unwrap(response, _load_object(response), model)


def decode_introspection(response: RawResponse) -> IntrospectionResponse:
    """Decode a 2xx introspection response.

    Accepts both a bare RFC 7662 body (``{"active": ...}``) and one wrapped
    in an envelope.
    """
    payload = _load_object(response)
    if "active" in payload and "code" not in payload and "success" not in payload:
        try:
            return IntrospectionResponse.model_validate(payload)
        except ValidationError as exc:
            raise _decode_error(response, f"unexpected introspection body: {exc}") from exc
    return _unwrap(response, payload, IntrospectionResponse)
