"""In-memory transport for telemetry records."""

import threading

from insightipy.core.models import TelemetryRecord


class InMemoryTelemetryTransport:
    """In-memory implementation of TelemetryTransportPort.

    Stores tracked records in a list. Suitable for testing and for hosts
    that read records back in process.
    """

    def __init__(self) -> None:
        self._records: list[TelemetryRecord] = []
        self._lock = threading.Lock()
        self.flush_count = 0

    def track(self, record: TelemetryRecord) -> None:
        """Store a telemetry record."""
        with self._lock:
            self._records.append(record)

    def flush(self) -> None:
        """Nothing is buffered; only counts the call."""
        with self._lock:
            self.flush_count += 1

    @property
    def records(self) -> list[TelemetryRecord]:
        """Snapshot of tracked records, in tracking order."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        """Drop all tracked records."""
        with self._lock:
            self._records.clear()
