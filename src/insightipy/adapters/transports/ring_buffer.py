"""Ring buffer transport for telemetry records.

Provides bounded in-memory storage that automatically evicts the oldest
records when the buffer is full. Useful for services that expose recent
telemetry (e.g. on a diagnostics page) with predictable memory usage.
"""

import threading
from collections import deque

from insightipy.core.models import TelemetryRecord


class RingBufferTelemetryTransport:
    """Ring buffer implementation of TelemetryTransportPort.

    Stores records in a fixed-size circular buffer. When the buffer is
    full, the oldest record is evicted to make room for the new one.

    Args:
        max_size: Maximum number of records to keep.
    """

    def __init__(self, max_size: int) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._buffer: deque[TelemetryRecord] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def track(self, record: TelemetryRecord) -> None:
        """Store a record, evicting the oldest one if full."""
        with self._lock:
            self._buffer.append(record)

    def flush(self) -> None:
        """Nothing is buffered for delivery."""

    @property
    def records(self) -> list[TelemetryRecord]:
        """Snapshot of kept records, oldest first."""
        with self._lock:
            return list(self._buffer)
