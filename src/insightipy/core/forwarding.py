"""Forwarding of log event data into telemetry record properties."""

from dataclasses import dataclass, replace

from insightipy.core.encoding.values import render_value
from insightipy.core.formatters import append_property
from insightipy.core.models import LogEvent, TelemetryRecord
from insightipy.core.ports import ValueFormatterPort
from insightipy.core.templates import FormatProvider

# Reserved property keys, written before any user property
TELEMETRY_PROPERTIES_LOG_LEVEL = "LogLevel"
TELEMETRY_PROPERTIES_MESSAGE_TEMPLATE = "MessageTemplate"
TELEMETRY_PROPERTIES_RENDERED_MESSAGE = "RenderedMessage"

# Properties copied into the record's correlation context
OPERATION_ID_PROPERTY = "operationId"
VERSION_PROPERTY = "version"


@dataclass(frozen=True)
class PropertyForwardingOptions:
    """Which reserved fields are written alongside the user properties.

    Attributes:
        include_log_level: Write the level name under ``LogLevel``.
        include_rendered_message: Write the rendered message under
            ``RenderedMessage``.
        include_message_template: Write the raw template under
            ``MessageTemplate``.
    """

    include_log_level: bool = False
    include_rendered_message: bool = False
    include_message_template: bool = False

    def with_message_template(self) -> "PropertyForwardingOptions":
        """Return a copy with the message template enabled."""
        return replace(self, include_message_template=True)


def _correlation_text(log_event: LogEvent, name: str) -> str | None:
    value = log_event.properties.get(name)
    if value is None:
        return None
    return render_value(value).strip('"')


def forward_properties(
    log_event: LogEvent,
    record: TelemetryRecord,
    value_formatter: ValueFormatterPort,
    options: PropertyForwardingOptions = PropertyForwardingOptions(),
    format_provider: FormatProvider | None = None,
) -> None:
    """Forward a log event's data into a telemetry record.

    Order of writes:
        1. ``LogLevel`` if enabled
        2. ``RenderedMessage`` if enabled
        3. ``MessageTemplate`` if enabled
        4. ``operationId`` / ``version`` into the record context
        5. every other property not yet present, through value_formatter

    A user property named like a reserved key is therefore dropped, never
    written over the reserved value.

    Args:
        log_event: The source event.
        record: The telemetry record whose properties are filled in.
        value_formatter: Strategy rendering each user property.
        options: Which reserved fields to write.
        format_provider: Passed through to message rendering.

    Raises:
        TypeError: If log_event, record or value_formatter is None.
    """
    if log_event is None:
        raise TypeError("log_event must not be None")
    if record is None:
        raise TypeError("record must not be None")
    if value_formatter is None:
        raise TypeError("value_formatter must not be None")

    properties = record.properties

    if options.include_log_level:
        append_property(properties, TELEMETRY_PROPERTIES_LOG_LEVEL, str(log_event.level))

    if options.include_rendered_message:
        append_property(
            properties,
            TELEMETRY_PROPERTIES_RENDERED_MESSAGE,
            log_event.render_message(format_provider),
        )

    if options.include_message_template:
        append_property(
            properties,
            TELEMETRY_PROPERTIES_MESSAGE_TEMPLATE,
            log_event.message_template.text,
        )

    context = getattr(record, "context", None)
    if context is not None:
        operation_id = _correlation_text(log_event, OPERATION_ID_PROPERTY)
        if operation_id is not None:
            context.operation_id = operation_id
        version = _correlation_text(log_event, VERSION_PROPERTY)
        if version is not None:
            context.component_version = version

    for name, value in log_event.properties.items():
        if value is None or name in properties:
            continue
        value_formatter.format(name, value, properties)
