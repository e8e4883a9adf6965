"""Core domain models: log events in, telemetry records out."""

import enum
import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from insightipy.core.templates import FormatProvider, MessageTemplate
from insightipy.core.values import StructuredValue


class LogEventLevel(enum.IntEnum):
    """Ordered severity of a log event."""

    VERBOSE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    def __str__(self) -> str:
        return self.name.capitalize()


class SeverityLevel(enum.IntEnum):
    """Severity understood by the telemetry backend."""

    VERBOSE = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class LogEvent:
    """A structured, immutable log event produced by the logging front-end.

    Attributes:
        timestamp: When the event occurred (timezone-aware).
        level: Event severity.
        message_template: Unrendered template the message was written with.
        properties: Named structured values captured with the event.
        exception: The error that caused the event, if any.
    """

    timestamp: datetime
    level: LogEventLevel
    message_template: MessageTemplate
    properties: Mapping[str, StructuredValue] = field(default_factory=dict)
    exception: BaseException | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "properties", MappingProxyType(dict(self.properties))
        )

    def render_message(self, format_provider: FormatProvider | None = None) -> str:
        """Render the message template against this event's properties."""
        return self.message_template.render(self.properties, format_provider)


@dataclass
class TelemetryContext:
    """Correlation and environment fields attached to a telemetry record.

    Attributes:
        operation_id: Distributed operation the record belongs to.
        component_version: Version of the emitting application component.
        device_os_version: Operating system of the emitting host.
    """

    operation_id: str | None = None
    component_version: str | None = None
    device_os_version: str | None = None


@dataclass(kw_only=True)
class TelemetryRecord:
    """Base class for backend-bound telemetry.

    Records are mutable while the conversion call builds them; ownership
    passes to the transport once tracked.

    Attributes:
        timestamp: When the originating event occurred.
        properties: Flat string properties; keys are unique, first write wins.
        context: Correlation fields.
    """

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    properties: dict[str, str] = field(default_factory=dict)
    context: TelemetryContext = field(default_factory=TelemetryContext)

    kind = "record"


@dataclass(kw_only=True)
class TraceTelemetry(TelemetryRecord):
    """A trace: rendered message text plus severity."""

    message: str
    severity_level: SeverityLevel | None = None

    kind = "trace"


@dataclass(kw_only=True)
class EventTelemetry(TelemetryRecord):
    """A named custom event. The name is the raw message template text."""

    name: str

    kind = "event"


@dataclass(kw_only=True)
class ExceptionTelemetry(TelemetryRecord):
    """An exception carrying the error's own type, message and stack."""

    exception: BaseException
    severity_level: SeverityLevel | None = None

    kind = "exception"

    @property
    def exception_type(self) -> str:
        return type(self.exception).__name__

    @property
    def exception_message(self) -> str:
        return str(self.exception)

    @property
    def stack_trace(self) -> str:
        return "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )
