"""Text and compact JSON rendering for structured values.

Scalars render with culture-invariant rules:

    None              -> "null"
    bool              -> "true" / "false"
    str               -> verbatim (no quoting, no escaping)
    int / Decimal     -> decimal text
    float             -> shortest round-trip text (repr)
    datetime/date/time -> ISO-8601

Anything else falls back to ``str(value)``. Rendering never raises. In
compact JSON, finite Decimals are written as numbers.
"""

import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from insightipy.core import selflog
from insightipy.core.values import (
    DictionaryValue,
    ScalarValue,
    SequenceValue,
    StructuredValue,
    StructureValue,
)

TYPE_TAG_PROPERTY = "_typeTag"


def _fallback_text(value: object) -> str:
    """Default text conversion for unrecognized scalar subtypes."""
    try:
        return str(value)
    except Exception as e:  # noqa: BLE001 - rendering must never raise
        selflog.write_line(
            "Failed to render value of type %s: %r", type(value).__name__, e
        )
        return f"<{type(value).__name__}>"


def render_scalar(value: Any) -> str:
    """Render a primitive as flat property text.

    Args:
        value: The primitive carried by a ScalarValue.

    Returns:
        Culture-invariant text for the value.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return repr(float(value))
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return _fallback_text(value)


def _scalar_to_json(value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        # NaN and infinities are not valid JSON numbers
        return value if math.isfinite(value) else render_scalar(value)
    if isinstance(value, Decimal) and value.is_finite():
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return render_scalar(value)


def to_jsonable(value: StructuredValue) -> Any:
    """Convert a structured value into plain JSON-compatible Python data.

    Structure fields keep their capture order; a type tag is appended under
    ``_typeTag``. Dictionary keys use the rendered key text.
    """
    if isinstance(value, ScalarValue):
        return _scalar_to_json(value.value)
    if isinstance(value, SequenceValue):
        return [to_jsonable(element) for element in value.elements]
    if isinstance(value, DictionaryValue):
        return {
            render_scalar(key.value): to_jsonable(element)
            for key, element in value.elements
        }
    if isinstance(value, StructureValue):
        obj = {prop.name: to_jsonable(prop.value) for prop in value.properties}
        if value.type_tag is not None:
            obj[TYPE_TAG_PROPERTY] = value.type_tag
        return obj
    return _scalar_to_json(value)


def to_compact_json(value: StructuredValue) -> str:
    """Serialize a structured value as compact JSON (no whitespace)."""
    return json.dumps(to_jsonable(value), separators=(",", ":"), ensure_ascii=False)


def render_value(value: StructuredValue) -> str:
    """Render any structured value as a single piece of text.

    Scalars use render_scalar; every other shape becomes compact JSON.
    """
    if isinstance(value, ScalarValue):
        return render_scalar(value.value)
    return to_compact_json(value)
