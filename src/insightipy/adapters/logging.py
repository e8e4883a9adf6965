"""Python logging handler adapter for insightipy.

This adapter bridges Python's standard library logging module to a
TelemetrySink: each LogRecord becomes a LogEvent, which the sink converts
and tracks. Messages may use brace-style templates, so properties keep
their structure:

    logger.info("Processed {@Position} in {Elapsed} ms", {"Position": pos, "Elapsed": 34})
    logger.info("Processed {@Position} in {Elapsed} ms", pos, 34)

%-style messages are rendered by logging itself and forwarded as plain text.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from insightipy.adapters.log_context import get_log_context
from insightipy.adapters.sink import TelemetrySink
from insightipy.core.capture import capture_value
from insightipy.core.models import LogEvent, LogEventLevel
from insightipy.core.templates import Destructuring, MessageTemplate, PropertyToken
from insightipy.core.values import ScalarValue, StructuredValue

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

ContextProvider = Callable[[], Mapping[str, Any]]


def level_from_logging(levelno: int) -> LogEventLevel:
    """Map a stdlib logging level number to a LogEventLevel.

    Levels below DEBUG map to Verbose, CRITICAL (and above) to Fatal.
    """
    if levelno < logging.DEBUG:
        return LogEventLevel.VERBOSE
    if levelno < logging.INFO:
        return LogEventLevel.DEBUG
    if levelno < logging.WARNING:
        return LogEventLevel.INFORMATION
    if levelno < logging.ERROR:
        return LogEventLevel.WARNING
    if levelno < logging.CRITICAL:
        return LogEventLevel.ERROR
    return LogEventLevel.FATAL


def _capture_for(token: PropertyToken | None, value: Any) -> StructuredValue:
    if token is not None and token.destructuring is Destructuring.STRINGIFY:
        return ScalarValue(str(value))
    destructure = token is not None and token.destructuring is Destructuring.DESTRUCTURE
    return capture_value(value, destructure=destructure)


def _template_and_bound_args(
    record: logging.LogRecord,
) -> tuple[MessageTemplate, dict[str, Any]]:
    """Work out the template text and the arguments bound to its holes."""
    text = record.msg if isinstance(record.msg, str) else str(record.msg)
    template = MessageTemplate(text)
    args = record.args

    if isinstance(args, Mapping):
        return template, dict(args)
    if not args:
        return template, {}

    holes = template.property_tokens
    if holes:
        bound: dict[str, Any] = {}
        for token, value in zip(holes, args, strict=False):
            bound.setdefault(token.property_name, value)
        return template, bound

    # %-style message: let logging render it, keep braces literal
    rendered = record.getMessage()
    return MessageTemplate(rendered.replace("{", "{{").replace("}", "}}")), {}


def log_event_from_record(
    record: logging.LogRecord,
    context_properties: Mapping[str, Any] | None = None,
) -> LogEvent:
    """Build a LogEvent from a stdlib LogRecord.

    Property precedence, lowest to highest: context properties, ``extra``
    fields, template arguments. Python None values are not captured.

    Args:
        record: The record to convert.
        context_properties: Ambient properties (log context, providers).

    Returns:
        The equivalent LogEvent.
    """
    template, bound_args = _template_and_bound_args(record)
    tokens = {token.property_name: token for token in template.property_tokens}

    raw: dict[str, Any] = dict(context_properties or {})
    for key, value in record.__dict__.items():
        if key not in _STANDARD_LOGRECORD_ATTRS and not key.startswith("_"):
            raw[key] = value
    raw.update(bound_args)

    properties = {
        name: _capture_for(tokens.get(name), value)
        for name, value in raw.items()
        if value is not None
    }

    exception = None
    if record.exc_info and record.exc_info[1] is not None:
        exception = record.exc_info[1]

    return LogEvent(
        timestamp=datetime.fromtimestamp(record.created, tz=UTC),
        level=level_from_logging(record.levelno),
        message_template=template,
        properties=properties,
        exception=exception,
    )


class TelemetryHandler(logging.Handler):
    """Logging handler that sends log records through a TelemetrySink.

    Example:
        ```python
        from insightipy import TelemetryHandler, create_sink
        from insightipy.adapters.transports import InMemoryTelemetryTransport

        sink = create_sink(InMemoryTelemetryTransport())
        logging.getLogger().addHandler(TelemetryHandler(sink))
        ```
    """

    def __init__(
        self,
        sink: TelemetrySink,
        level: int = logging.NOTSET,
        context_provider: ContextProvider | None = None,
    ) -> None:
        """Initialize the handler with a sink.

        Args:
            sink: Sink receiving one LogEvent per record.
            level: Minimum record level handled.
            context_provider: Callable returning extra ambient properties
                merged under the record's own fields.
        """
        super().__init__(level)
        if sink is None:
            raise TypeError("sink must not be None")
        self._sink = sink
        self._context_provider = context_provider

    @property
    def sink(self) -> TelemetrySink:
        return self._sink

    def _context_properties(self) -> dict[str, Any]:
        properties = get_log_context()
        if self._context_provider is not None:
            properties.update(self._context_provider())
        return properties

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the sink.

        Failures are reported through logging's own handleError, so a broken
        converter or transport never raises into the logging call.

        Args:
            record: The log record to emit.
        """
        try:
            event = log_event_from_record(record, self._context_properties())
            self._sink.emit(event)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Flush the sink's transport unless the sink is already closed."""
        if not self._sink.is_disposed:
            self._sink.transport.flush()

    def close(self) -> None:
        """Close the sink (flushing its transport), then the handler."""
        try:
            self._sink.close()
        finally:
            super().close()
