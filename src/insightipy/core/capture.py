"""Capture of arbitrary Python objects as structured values.

Used by the stdlib logging bridge to turn ``extra`` fields and template
arguments into StructuredValue instances:

- None, bool, str, numbers, dates, UUIDs, enums -> ScalarValue
- Mappings -> DictionaryValue (keys captured as scalars)
- lists, tuples, sets and frozensets -> SequenceValue. Other iterables
  (generators, iterators) are not consumed and stay scalars
- dataclasses and plain objects -> StructureValue when destructuring,
  otherwise ScalarValue holding the object (rendered via str())

Nesting deeper than ``max_depth`` and reference cycles are cut off with a
null scalar.
"""

import dataclasses
import enum
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from insightipy.core.values import (
    DictionaryValue,
    LogEventProperty,
    ScalarValue,
    SequenceValue,
    StructuredValue,
    StructureValue,
)

MAX_DESTRUCTURING_DEPTH = 10

_SCALAR_TYPES = (
    str,
    bytes,
    bool,
    int,
    float,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    uuid.UUID,
    enum.Enum,
)


def _is_structured(value: object) -> bool:
    return isinstance(
        value, (ScalarValue, SequenceValue, DictionaryValue, StructureValue)
    )


def _public_fields(value: object) -> Iterable[tuple[str, Any]]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ((f.name, getattr(value, f.name)) for f in dataclasses.fields(value))
    attrs = getattr(value, "__dict__", None)
    if attrs is None:
        return ()
    return ((k, v) for k, v in attrs.items() if not k.startswith("_"))


def capture_value(
    value: Any,
    destructure: bool = False,
    max_depth: int = MAX_DESTRUCTURING_DEPTH,
) -> StructuredValue:
    """Convert a Python object into a StructuredValue.

    Args:
        value: Object to capture. Already-structured values are returned as is.
        destructure: Capture objects field by field instead of as scalars.
        max_depth: Maximum nesting depth before values are replaced by null.

    Returns:
        The captured value.
    """
    return _capture(value, destructure, max_depth, set())


def _capture(
    value: Any, destructure: bool, depth: int, seen: set[int]
) -> StructuredValue:
    if _is_structured(value):
        return value
    if value is None or isinstance(value, _SCALAR_TYPES):
        return ScalarValue(value)
    if depth <= 0 or id(value) in seen:
        return ScalarValue(None)

    seen = seen | {id(value)}
    if isinstance(value, Mapping):
        elements = []
        for k, v in value.items():
            key = k if k is None or isinstance(k, _SCALAR_TYPES) else str(k)
            elements.append(
                (ScalarValue(key), _capture(v, destructure, depth - 1, seen))
            )
        return DictionaryValue(tuple(elements))
    if isinstance(value, (list, tuple, set, frozenset)):
        return SequenceValue(
            tuple(_capture(v, destructure, depth - 1, seen) for v in value)
        )
    if destructure:
        return StructureValue(
            properties=tuple(
                LogEventProperty(name, _capture(v, destructure, depth - 1, seen))
                for name, v in _public_fields(value)
            ),
            type_tag=type(value).__name__,
        )
    return ScalarValue(value)
