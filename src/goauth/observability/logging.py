"""Structured logging for the goauth SDK.

The SDK logs through structlog under the ``goauth`` logger namespace. Output
goes to a handler attached to the ``goauth`` logger only, so the library does
not take over the application's root logger.

Environment Variables:
    GOAUTH_LOG_FORMAT: "json" for JSON lines, "console" for colored output
    GOAUTH_LOG_LEVEL: Minimum level for goauth loggers (DEBUG, INFO, WARNING, ERROR)
    GOAUTH_SERVICE_NAME: Value of the ``service`` field on every event
    GOAUTH_DEBUG: "true" or "1" to log request forms without redaction

Example:
    >>> from goauth.observability.logging import bound_context, configure_logging, get_logger
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> logger = get_logger("goauth.client")
    >>> with bound_context(operation="exchange_token"):
    ...     logger.info("goauth.oauth.token_issued", grant_type="authorization_code")
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

LIBRARY_LOGGER_NAME = "goauth"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "goauth-sdk"

ENV_LOG_FORMAT = "GOAUTH_LOG_FORMAT"
ENV_LOG_LEVEL = "GOAUTH_LOG_LEVEL"
ENV_SERVICE_NAME = "GOAUTH_SERVICE_NAME"
ENV_DEBUG = "GOAUTH_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Substrings (case-insensitive) marking a credential-bearing key
_SENSITIVE_KEY_PATTERNS = frozenset(
    {"password", "token", "secret", "key", "authorization", "auth"}
)
# Keys redacted only on an exact match; "code" is the authorization code,
# while status_code and friends are not sensitive
_SENSITIVE_EXACT_KEYS = frozenset({"code"})

_logging_configured = False


def is_debug_mode() -> bool:
    """Return True if GOAUTH_DEBUG is set to a truthy value (e.g. true, 1)."""
    return os.environ.get(ENV_DEBUG, "").strip().lower() in ("true", "1", "yes", "on")


def _is_sensitive_key(key: str) -> bool:
    lower = key.lower()
    return lower in _SENSITIVE_EXACT_KEYS or any(p in lower for p in _SENSITIVE_KEY_PATTERNS)


def sanitize_for_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``data`` with credential values redacted.

    Used for OAuth form parameters before they are attached to log events:
    ``code``, ``refresh_token``, ``token`` and similar keys are replaced with
    REDACTED_PLACEHOLDER, nested dicts included. With GOAUTH_DEBUG enabled
    the data is returned unredacted.

    Example:
        >>> sanitize_for_logging({"grant_type": "refresh_token", "refresh_token": "abc"})
        {'grant_type': 'refresh_token', 'refresh_token': '***REDACTED***'}
    """
    if not data:
        return {}
    if is_debug_mode():
        return dict(data)
    result: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            result[key] = REDACTED_PLACEHOLDER
        elif isinstance(value, dict):
            result[key] = sanitize_for_logging(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _service_name_adder(service_name: str) -> Processor:
    def add_service_name(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def _get_renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Configure structlog and the ``goauth`` stdlib logger.

    Args:
        log_format: "json" or "console". Defaults to GOAUTH_LOG_FORMAT or "console".
        log_level: Minimum level. Defaults to GOAUTH_LOG_LEVEL or "INFO".
        service_name: ``service`` field value. Defaults to GOAUTH_SERVICE_NAME.
        force: Reconfigure even if logging was already configured.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    service_name = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_name_adder(service_name),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _get_renderer(log_format),
            ],
        )
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(getattr(logging, log_level, logging.INFO))
    library_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring defaults on first use.

    Args:
        name: Logger name, typically ``__name__`` of a goauth module.
    """
    if not _logging_configured:
        configure_logging()

    return structlog.stdlib.get_logger(name)


@contextmanager
def bound_context(**kwargs: Any) -> Iterator[None]:
    """Attach ``kwargs`` to every event logged inside the block.

    The previous context is restored on exit, so concurrent tasks and
    sequential calls do not see each other's values.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
