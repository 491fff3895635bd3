"""Observability module for the goauth SDK.

Structured logging built on structlog, with JSON output for production and
colored console output for development.

Example:
    >>> from goauth.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("goauth.oauth.token_issued", grant_type="authorization_code")
"""

from goauth.observability.logging import (
    LIBRARY_LOGGER_NAME,
    REDACTED_PLACEHOLDER,
    bound_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "LIBRARY_LOGGER_NAME",
    "REDACTED_PLACEHOLDER",
    "bound_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
