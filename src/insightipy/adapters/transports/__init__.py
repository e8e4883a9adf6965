"""Transport adapters implementing TelemetryTransportPort."""

from insightipy.adapters.transports.in_memory import InMemoryTelemetryTransport
from insightipy.adapters.transports.ndjson_stream import NdjsonStreamTransport
from insightipy.adapters.transports.ring_buffer import RingBufferTelemetryTransport
from insightipy.adapters.transports.sqlite import SQLiteTelemetryTransport

__all__ = [
    "InMemoryTelemetryTransport",
    "NdjsonStreamTransport",
    "RingBufferTelemetryTransport",
    "SQLiteTelemetryTransport",
]
