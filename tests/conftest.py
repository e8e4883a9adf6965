"""Shared test fixtures for all test modules."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from tests.helpers import make_event

from insightipy.adapters.log_context import clear_log_context
from insightipy.adapters.transports.in_memory import InMemoryTelemetryTransport
from insightipy.core.models import LogEvent
from insightipy.core.selflog import SELFLOG_LOGGER_NAME


@pytest.fixture
def event_factory() -> Callable[..., LogEvent]:
    """Factory fixture for LogEvents with a fixed timestamp."""
    return make_event


@pytest.fixture
def transport() -> InMemoryTelemetryTransport:
    """Fresh in-memory transport."""
    return InMemoryTelemetryTransport()


@pytest.fixture
def telemetry_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for SQLite transport tests."""
    return str(tmp_path / "telemetry.db")


@pytest.fixture(autouse=True)
def _reset_log_context() -> Iterator[None]:
    """Every test starts and ends with an empty log context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def selflog_records() -> Iterator[list[logging.LogRecord]]:
    """Capture diagnostics written to the self-log channel."""
    records: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _ListHandler(logging.DEBUG)
    logger = logging.getLogger(SELFLOG_LOGGER_NAME)
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield records
    logger.removeHandler(handler)
    logger.setLevel(previous_level)
