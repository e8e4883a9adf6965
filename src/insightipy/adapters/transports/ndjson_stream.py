"""NDJSON stream transport: one JSON line per telemetry record.

Writes to any text stream (a file, a pipe, sys.stdout) so that an external
shipper can pick the records up.
"""

import sys
import threading
from typing import TextIO

from insightipy.core.encoding.ndjson import encode_record
from insightipy.core.models import TelemetryRecord


class NdjsonStreamTransport:
    """Writes telemetry records as newline-delimited JSON.

    Args:
        stream: Text stream to write to. Defaults to sys.stdout.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()

    def track(self, record: TelemetryRecord) -> None:
        """Write one record as a JSON line."""
        line = encode_record(record) + "\n"
        with self._lock:
            self._stream.write(line)

    def flush(self) -> None:
        """Flush the underlying stream."""
        with self._lock:
            self._stream.flush()
