"""Value formatters: structured property values to flat string properties.

Two strategies are available:

- JsonValueFormatter: scalars as plain text, anything else as one compact
  JSON property.
- DottedValueFormatter: nested values are flattened into one property per
  leaf, e.g. ``Position.Latitude``, ``numbers.0`` ... ``numbers.Count``.

Both keep the first value written under a key. A later write to the same
key is dropped and reported on the self-log channel.
"""

from collections.abc import MutableMapping

from insightipy.core import selflog
from insightipy.core.encoding.values import render_scalar, render_value
from insightipy.core.values import (
    DictionaryValue,
    ScalarValue,
    SequenceValue,
    StructuredValue,
    StructureValue,
)


def append_property(properties: MutableMapping[str, str], key: str, value: str) -> bool:
    """Add a property unless the key is already taken.

    Args:
        properties: Target property map.
        key: Property key.
        value: Rendered value.

    Returns:
        True if the value was written, False if the key already existed.
    """
    if key in properties:
        selflog.write_line(
            "The key %s is not unique after simplification. Ignoring new value %s",
            key,
            value,
        )
        return False
    properties[key] = value
    return True


class JsonValueFormatter:
    """Compact strategy: one property per value, non-scalars as JSON."""

    def format(
        self,
        property_name: str,
        value: StructuredValue,
        properties: MutableMapping[str, str],
    ) -> None:
        append_property(properties, property_name, render_value(value))


class DottedValueFormatter:
    """Flattening strategy: one property per leaf value.

    Structures emit ``{parent}.{field}``, dictionaries ``{parent}.{key}``,
    sequences ``{parent}.{index}`` for each element followed by
    ``{parent}.Count``.
    """

    def format(
        self,
        property_name: str,
        value: StructuredValue,
        properties: MutableMapping[str, str],
    ) -> None:
        self._write_value(property_name, value, properties)

    def _write_value(
        self, key: str, value: StructuredValue, properties: MutableMapping[str, str]
    ) -> None:
        if isinstance(value, StructureValue):
            for prop in value.properties:
                self._write_value(f"{key}.{prop.name}", prop.value, properties)
        elif isinstance(value, DictionaryValue):
            for element_key, element in value.elements:
                self._write_value(
                    f"{key}.{render_scalar(element_key.value)}", element, properties
                )
        elif isinstance(value, SequenceValue):
            for index, element in enumerate(value.elements):
                self._write_value(f"{key}.{index}", element, properties)
            append_property(properties, f"{key}.Count", str(len(value.elements)))
        elif isinstance(value, ScalarValue):
            append_property(properties, key, render_scalar(value.value))
        else:
            append_property(properties, key, render_scalar(value))
