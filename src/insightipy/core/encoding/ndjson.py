"""NDJSON encoder for telemetry records."""

import json
from collections.abc import Iterable
from typing import Any

from insightipy.core.models import (
    EventTelemetry,
    ExceptionTelemetry,
    TelemetryRecord,
    TraceTelemetry,
)


def record_to_dict(record: TelemetryRecord) -> dict[str, Any]:
    """Convert a telemetry record into a JSON-compatible dict.

    Args:
        record: A trace, event or exception record.

    Returns:
        Dict with ``kind``, ``timestamp`` (ISO-8601), kind-specific payload,
        ``context`` and ``properties``. Unset context fields are omitted.
    """
    obj: dict[str, Any] = {
        "kind": record.kind,
        "timestamp": record.timestamp.isoformat(),
    }
    if isinstance(record, TraceTelemetry):
        obj["message"] = record.message
    elif isinstance(record, EventTelemetry):
        obj["name"] = record.name
    elif isinstance(record, ExceptionTelemetry):
        obj["exception"] = {
            "type": record.exception_type,
            "message": record.exception_message,
            "stack": record.stack_trace,
        }

    severity = getattr(record, "severity_level", None)
    if severity is not None:
        obj["severity"] = str(severity)

    obj["context"] = {
        key: value
        for key, value in (
            ("operation_id", record.context.operation_id),
            ("component_version", record.context.component_version),
            ("device_os_version", record.context.device_os_version),
        )
        if value is not None
    }
    obj["properties"] = dict(record.properties)
    return obj


def encode_record(record: TelemetryRecord) -> str:
    """Encode one record as a single JSON line (no trailing newline)."""
    return json.dumps(record_to_dict(record), ensure_ascii=False)


def encode_records(records: Iterable[TelemetryRecord]) -> str:
    """Encode telemetry records to newline-delimited JSON.

    Args:
        records: An iterable of TelemetryRecord objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [encode_record(record) for record in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
