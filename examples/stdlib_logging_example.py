"""Stdlib logging wired to a telemetry sink.

Run with:
    python examples/stdlib_logging_example.py

Every log call is converted into a trace (or an exception record when the
call carries one) and written to stdout as one NDJSON line. Set
INSIGHTIPY_TELEMETRY_KIND=events to get custom events instead.
"""

import logging
from dataclasses import dataclass

from insightipy import (
    OsVersionContextInitializer,
    SinkOptions,
    TelemetryHandler,
    create_sink,
    push_property,
)
from insightipy.adapters.transports import NdjsonStreamTransport


@dataclass
class Position:
    Latitude: float
    Longitude: float


def main() -> None:
    options = SinkOptions.from_env()
    sink = create_sink(
        NdjsonStreamTransport(),
        options,
        context_initializers=[OsVersionContextInitializer()],
    )
    handler = TelemetryHandler(sink)

    logger = logging.getLogger("example")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)

    with push_property("operationId", "req-1234"):
        logger.info("Processed {@Position} in {Elapsed:000} ms", Position(25.0, 134.0), 34)
        logger.debug("cache hit for %s", "user:42")

    try:
        1 / 0
    except ZeroDivisionError:
        logger.exception("Division failed for {Operand}", {"Operand": 1})

    handler.close()


if __name__ == "__main__":
    main()
