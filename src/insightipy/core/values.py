"""Structured property values carried by log events.

A property value is one of four shapes: a scalar, an ordered sequence, an
ordered dictionary keyed by scalars, or a structure of named fields with an
optional type tag. Values are immutable; list arguments are normalised to
tuples so that events can be shared across threads.
"""

from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True)
class ScalarValue:
    """A primitive value.

    Attributes:
        value: None, bool, str, int, float, Decimal, datetime/date/time, or
            any other object. Unrecognized objects are rendered through their
            default text conversion.
    """

    value: Any = None


@dataclass(frozen=True)
class SequenceValue:
    """An ordered list of structured values."""

    elements: tuple["StructuredValue", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))


@dataclass(frozen=True)
class DictionaryValue:
    """An ordered list of (scalar key, structured value) pairs."""

    elements: tuple[tuple[ScalarValue, "StructuredValue"], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "elements", tuple((key, value) for key, value in self.elements)
        )


@dataclass(frozen=True)
class LogEventProperty:
    """A named field of a StructureValue."""

    name: str
    value: "StructuredValue"


@dataclass(frozen=True)
class StructureValue:
    """An ordered list of named fields with an optional type tag.

    Attributes:
        properties: Fields in capture order.
        type_tag: Name of the captured type, or None for anonymous shapes.
    """

    properties: tuple[LogEventProperty, ...] = ()
    type_tag: str | None = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", tuple(self.properties))


StructuredValue: TypeAlias = ScalarValue | SequenceValue | DictionaryValue | StructureValue


def structure(type_tag: str | None = None, **fields: "StructuredValue") -> StructureValue:
    """Build a StructureValue from keyword fields, keeping their order."""
    return StructureValue(
        properties=tuple(LogEventProperty(name, value) for name, value in fields.items()),
        type_tag=type_tag,
    )
