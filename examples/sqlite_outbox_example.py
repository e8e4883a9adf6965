"""Local SQLite outbox drained by an async shipper.

Run with:
    python examples/sqlite_outbox_example.py

Log calls write telemetry into a SQLite file on the caller's thread; an
asyncio task reads new rows since its last checkpoint, as a shipper to the
backend would, and prunes what it has shipped.
"""

import asyncio
import logging
import tempfile
import time
from pathlib import Path

from insightipy import SinkOptions, TelemetryHandler, create_sink
from insightipy.adapters.transports import SQLiteTelemetryTransport


async def ship(outbox: SQLiteTelemetryTransport, since: float) -> float:
    """Print every record newer than since; return the new checkpoint."""
    checkpoint = since
    async for row in outbox.read(since=since):
        print(row["kind"], row.get("message") or row.get("name"), row["properties"])
        checkpoint = time.time()
    await outbox.delete_before(checkpoint)
    return checkpoint


async def main() -> None:
    db_path = str(Path(tempfile.mkdtemp()) / "outbox.db")
    outbox = SQLiteTelemetryTransport(db_path)
    handler = TelemetryHandler(
        create_sink(outbox, SinkOptions(include_log_level=True, application_version="1.0.0"))
    )
    logger = logging.getLogger("outbox")
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)

    for order_id in range(3):
        logger.info("Order {OrderId} placed", {"OrderId": order_id})

    checkpoint = await ship(outbox, since=0)
    print("remaining:", await outbox.count(), "checkpoint:", checkpoint)

    handler.close()
    await outbox.close()


if __name__ == "__main__":
    asyncio.run(main())
