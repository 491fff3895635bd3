"""Shared pytest fixtures for goauth SDK tests."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest
import structlog

from goauth.config import ClientConfig
from goauth.observability import LIBRARY_LOGGER_NAME, configure_logging
from tests.factories import create_config


@pytest.fixture
def config() -> ClientConfig:
    """A valid configuration without transport or token secrets."""
    return create_config()


@pytest.fixture(autouse=True)
def _clear_log_context() -> Iterator[None]:
    """Keep structlog context vars from leaking between tests."""
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def json_log_stream() -> Iterator[io.StringIO]:
    """Route goauth logs, rendered as JSON lines at DEBUG level, into a buffer."""
    configure_logging(log_format="json", log_level="DEBUG", force=True)
    stream = io.StringIO()
    for handler in logging.getLogger(LIBRARY_LOGGER_NAME).handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setStream(stream)
    yield stream
    configure_logging(force=True)
