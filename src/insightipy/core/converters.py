"""Telemetry converters: one log event to zero, one or many records.

Every converter takes the exception path first: an event carrying an
exception becomes exactly one ExceptionTelemetry. Otherwise the converter
produces its own kind of record:

- TraceTelemetryConverter: a trace whose message is the rendered message.
- EventTelemetryConverter: an event named after the raw template text.
- EventDetailTelemetryConverter: an event with all reserved keys included.

Converters are specialised by configuration (value formatter, forwarding
options) or by subclassing and overriding ``convert``, ``value_formatter``
or ``forward_properties_to_telemetry_properties``. A converter holds no
per-event state and may be shared across threads.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from insightipy.core.formatters import JsonValueFormatter
from insightipy.core.forwarding import PropertyForwardingOptions, forward_properties
from insightipy.core.models import (
    EventTelemetry,
    ExceptionTelemetry,
    LogEvent,
    LogEventLevel,
    SeverityLevel,
    TelemetryRecord,
    TraceTelemetry,
)
from insightipy.core.ports import ValueFormatterPort
from insightipy.core.severity import to_severity_level
from insightipy.core.templates import FormatProvider


class TelemetryConverterBase(ABC):
    """Base class for telemetry converters.

    Args:
        value_formatter: Strategy for user properties. Defaults to
            JsonValueFormatter.
        forwarding: Reserved fields to include. Defaults to the class-level
            ``default_forwarding``.
    """

    default_forwarding = PropertyForwardingOptions(include_message_template=True)

    def __init__(
        self,
        value_formatter: ValueFormatterPort | None = None,
        forwarding: PropertyForwardingOptions | None = None,
    ) -> None:
        self._value_formatter = value_formatter or JsonValueFormatter()
        self.forwarding = forwarding or self.default_forwarding

    @property
    def value_formatter(self) -> ValueFormatterPort:
        return self._value_formatter

    def convert(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> Iterator[TelemetryRecord]:
        """Convert a log event into telemetry records.

        The event is validated immediately; records are produced lazily and
        recomputed on every call.

        Raises:
            TypeError: If log_event is None.
        """
        if log_event is None:
            raise TypeError("log_event must not be None")
        return self._iter_records(log_event, format_provider)

    def _iter_records(
        self, log_event: LogEvent, format_provider: FormatProvider | None
    ) -> Iterator[TelemetryRecord]:
        if log_event.exception is not None:
            yield self.to_exception_telemetry(log_event, format_provider)
        else:
            yield self.to_default_telemetry(log_event, format_provider)

    @abstractmethod
    def to_default_telemetry(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> TelemetryRecord:
        """Build the converter's own kind of record for an event without an exception."""

    def to_exception_telemetry(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> ExceptionTelemetry:
        """Build an exception record from the event's causing error.

        The message template is always forwarded so the failure can be
        grouped by the statement that logged it.

        Raises:
            TypeError: If log_event is None.
            ValueError: If the event has no exception.
        """
        if log_event is None:
            raise TypeError("log_event must not be None")
        if log_event.exception is None:
            raise ValueError("log_event must have an exception")

        record = ExceptionTelemetry(
            exception=log_event.exception,
            severity_level=self.to_severity_level(log_event.level),
            timestamp=log_event.timestamp,
        )
        self.forward_properties_to_telemetry_properties(
            log_event,
            record,
            format_provider,
            self.forwarding.with_message_template(),
        )
        return record

    def forward_properties_to_telemetry_properties(
        self,
        log_event: LogEvent,
        record: TelemetryRecord,
        format_provider: FormatProvider | None = None,
        options: PropertyForwardingOptions | None = None,
    ) -> None:
        """Write the event's properties into the record.

        Both the default and the exception path go through this method.
        ``options`` defaults to this converter's forwarding options.
        """
        forward_properties(
            log_event,
            record,
            self.value_formatter,
            options or self.forwarding,
            format_provider,
        )

    @staticmethod
    def to_severity_level(level: LogEventLevel) -> SeverityLevel | None:
        return to_severity_level(level)


class TraceTelemetryConverter(TelemetryConverterBase):
    """Converts log events into traces.

    The trace message already carries the rendered message, so only the
    message template is forwarded as a reserved property.
    """

    def to_default_telemetry(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> TraceTelemetry:
        record = TraceTelemetry(
            message=log_event.render_message(format_provider),
            severity_level=self.to_severity_level(log_event.level),
            timestamp=log_event.timestamp,
        )
        self.forward_properties_to_telemetry_properties(log_event, record, format_provider)
        return record


class EventTelemetryConverter(TelemetryConverterBase):
    """Converts log events into custom events.

    The event name is the raw template text so that events aggregate by the
    statement that produced them; the rendered message goes into the
    ``RenderedMessage`` property instead.
    """

    default_forwarding = PropertyForwardingOptions(include_rendered_message=True)

    def to_default_telemetry(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> EventTelemetry:
        record = EventTelemetry(
            name=log_event.message_template.text,
            timestamp=log_event.timestamp,
        )
        self.forward_properties_to_telemetry_properties(log_event, record, format_provider)
        return record


class EventDetailTelemetryConverter(EventTelemetryConverter):
    """Like EventTelemetryConverter, but also forwards log level and template."""

    default_forwarding = PropertyForwardingOptions(
        include_log_level=True,
        include_rendered_message=True,
        include_message_template=True,
    )


class TelemetryConverter:
    """Factories for the built-in converters."""

    @staticmethod
    def traces(**kwargs: object) -> TraceTelemetryConverter:
        return TraceTelemetryConverter(**kwargs)  # type: ignore[arg-type]

    @staticmethod
    def events(**kwargs: object) -> EventTelemetryConverter:
        return EventTelemetryConverter(**kwargs)  # type: ignore[arg-type]
