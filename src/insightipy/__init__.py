"""insightipy: structured log events to trace, event and exception telemetry."""

from insightipy.adapters.log_context import push_property
from insightipy.adapters.logging import TelemetryHandler
from insightipy.adapters.sink import TelemetrySink, create_sink
from insightipy.core.context import (
    ApplicationVersionContextInitializer,
    OsVersionContextInitializer,
)
from insightipy.core.converters import (
    EventDetailTelemetryConverter,
    EventTelemetryConverter,
    TelemetryConverter,
    TelemetryConverterBase,
    TraceTelemetryConverter,
)
from insightipy.core.exceptions import (
    ConfigurationError,
    InsightipyError,
    SinkDisposedError,
)
from insightipy.core.formatters import DottedValueFormatter, JsonValueFormatter
from insightipy.core.forwarding import PropertyForwardingOptions
from insightipy.core.models import (
    EventTelemetry,
    ExceptionTelemetry,
    LogEvent,
    LogEventLevel,
    SeverityLevel,
    TelemetryContext,
    TelemetryRecord,
    TraceTelemetry,
)
from insightipy.core.options import SinkOptions
from insightipy.core.templates import MessageTemplate

__all__ = [
    "ApplicationVersionContextInitializer",
    "ConfigurationError",
    "DottedValueFormatter",
    "EventDetailTelemetryConverter",
    "EventTelemetry",
    "EventTelemetryConverter",
    "ExceptionTelemetry",
    "InsightipyError",
    "JsonValueFormatter",
    "LogEvent",
    "LogEventLevel",
    "MessageTemplate",
    "OsVersionContextInitializer",
    "PropertyForwardingOptions",
    "SeverityLevel",
    "SinkDisposedError",
    "SinkOptions",
    "TelemetryContext",
    "TelemetryConverter",
    "TelemetryConverterBase",
    "TelemetryHandler",
    "TelemetryRecord",
    "TelemetrySink",
    "TraceTelemetry",
    "TraceTelemetryConverter",
    "create_sink",
    "push_property",
]
