"""Builders shared by unit, integration and BDD tests."""

from datetime import UTC, datetime
from typing import Any

from insightipy.core.capture import capture_value
from insightipy.core.models import LogEvent, LogEventLevel
from insightipy.core.templates import MessageTemplate
from insightipy.core.values import StructuredValue

FIXED_TIMESTAMP = datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC)


def make_event(
    template: str = "test",
    level: LogEventLevel = LogEventLevel.INFORMATION,
    properties: dict[str, Any] | None = None,
    exception: BaseException | None = None,
    timestamp: datetime = FIXED_TIMESTAMP,
) -> LogEvent:
    """Build a LogEvent; plain Python property values are captured as scalars."""
    captured: dict[str, StructuredValue] = {
        name: capture_value(value) for name, value in (properties or {}).items()
    }
    return LogEvent(
        timestamp=timestamp,
        level=level,
        message_template=MessageTemplate(template),
        properties=captured,
        exception=exception,
    )


def raised(exc: BaseException) -> BaseException:
    """Return exc after raising and catching it, so it carries a traceback."""
    try:
        raise exc
    except BaseException as caught:  # noqa: BLE001
        return caught
