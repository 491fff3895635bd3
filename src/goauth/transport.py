"""HTTP transport adapter for the goauth SDK.

Sends one prepared request and returns the complete response. The network
layer is any ``httpx.AsyncBaseTransport``, so callers can swap in a proxy
transport, a custom TLS setup, or ``httpx.MockTransport`` in tests.

Each call opens its own ``httpx.AsyncClient``; the body is read eagerly and
the response and client are closed before returning, on success and on
failure alike.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from goauth.errors import TransportError
from goauth.observability import get_logger, sanitize_for_logging
from goauth.utils.sanitization import sanitize_url

logger = get_logger(__name__)

USER_AGENT = "goauth-sdk-python/0.1"


@dataclass(frozen=True)
class PreparedRequest:
    """A fully described HTTP request, independent of any client.

    Attributes:
        method: HTTP method.
        url: Absolute URL.
        headers: Request headers (including Authorization).
        form: Form fields for an ``application/x-www-form-urlencoded`` body,
            or None for requests without a body.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    form: Optional[dict[str, str]] = None


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and fully read body of an HTTP response."""

    status_code: int
    headers: httpx.Headers
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


async def send_request(
    prepared: PreparedRequest,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[float] = None,
) -> RawResponse:
    """Send a prepared request and return the complete response.

    Args:
        prepared: Request to send.
        transport: Optional httpx transport (defaults to httpx's network transport).
        timeout: Optional timeout in seconds; None means no timeout is imposed.

    Returns:
        RawResponse with the body already read.

    Raises:
        TransportError: On connection, protocol or timeout errors.
    """
    kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout)}
    if transport is not None:
        kwargs["transport"] = transport

    headers = {"User-Agent": USER_AGENT, **prepared.headers}
    start = time.perf_counter()
    try:
        async with httpx.AsyncClient(**kwargs) as client:
            request = client.build_request(
                prepared.method,
                prepared.url,
                headers=headers,
                data=prepared.form,
            )
            response = await client.send(request)
            body = response.content
    except httpx.HTTPError as exc:
        logger.warning(
            "goauth.http.transport_error",
            method=prepared.method,
            url=sanitize_url(prepared.url),
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise TransportError(prepared.method, sanitize_url(prepared.url), exc) from exc

    logger.debug(
        "goauth.http.response",
        method=prepared.method,
        url=sanitize_url(prepared.url),
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
        form=sanitize_for_logging(prepared.form),
    )
    return RawResponse(status_code=response.status_code, headers=response.headers, body=body)
