"""Port interfaces for the conversion pipeline.

These protocols define the contracts that transports, converters, value
formatters and context initializers must implement. The core depends only
on these interfaces, not on concrete implementations.
"""

from collections.abc import Iterable, MutableMapping
from typing import Protocol, runtime_checkable

from insightipy.core.models import LogEvent, TelemetryContext, TelemetryRecord
from insightipy.core.templates import FormatProvider
from insightipy.core.values import StructuredValue


@runtime_checkable
class TelemetryTransportPort(Protocol):
    """Port for delivering finished telemetry records.

    The transport owns batching, retrying and network delivery. From the
    pipeline's point of view ``track`` is fire-and-forget.
    Examples: InMemoryTelemetryTransport, NdjsonStreamTransport,
    SQLiteTelemetryTransport.
    """

    def track(self, record: TelemetryRecord) -> None:
        """Accept one telemetry record for delivery."""
        ...

    def flush(self) -> None:
        """Push out anything buffered. Called when the sink closes."""
        ...


@runtime_checkable
class TelemetryConverterPort(Protocol):
    """Port for turning one log event into telemetry records."""

    def convert(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> Iterable[TelemetryRecord]:
        """Convert a log event into zero, one or many telemetry records.

        Returns:
            A finite iterable; an empty one drops the event.
        """
        ...


@runtime_checkable
class ValueFormatterPort(Protocol):
    """Port for rendering one property value into flat string properties."""

    def format(
        self,
        property_name: str,
        value: StructuredValue,
        properties: MutableMapping[str, str],
    ) -> None:
        """Insert one or more entries for the value into ``properties``.

        Must not raise, and must never overwrite an existing key.
        """
        ...


@runtime_checkable
class ContextInitializerPort(Protocol):
    """Port for stamping environment fields onto every record's context."""

    def initialize(self, context: TelemetryContext) -> None:
        """Fill in context fields."""
        ...
