"""Message template parsing and rendering.

A message template is text with named holes, e.g.
``"Processed {@Position} in {Elapsed:000} ms."``. Holes support:

- ``{Name}``: default capture
- ``{@Name}``: destructure (capture the full structured shape)
- ``{$Name}``: stringify
- ``{Name,10}`` / ``{Name,-10}``: right / left alignment
- ``{Name:format}``: format specifier applied to scalars. Numbers accept
  zero-pad patterns (``000``, ``0.00``) and ``N``/``F``/``D``/``X`` with an
  optional precision; any other specifier is a Python format spec
- ``{{`` and ``}}``: literal braces

Malformed holes are kept as plain text.
"""

import enum
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from functools import cached_property
from typing import TypeAlias

from insightipy.core.encoding.values import render_scalar, to_compact_json
from insightipy.core.values import ScalarValue, StructuredValue

# (value, format_spec) -> text, or None to use the default rendering
FormatProvider: TypeAlias = Callable[[object, str | None], str | None]

_PROPERTY_NAME = re.compile(r"^[A-Za-z0-9_]+$")
_ALIGNMENT = re.compile(r"^-?[0-9]+$")
# "000", "0.00": minimum integer digits and fixed decimals
_ZERO_PATTERN = re.compile(r"^(0+)(?:\.(0+))?$")
# "N2", "F0", "D5", "X4"
_STANDARD_NUMERIC = re.compile(r"^([NnFfDdXx])([0-9]{0,2})$")


class Destructuring(enum.Enum):
    """How a hole asks for its value to be captured."""

    DEFAULT = ""
    STRINGIFY = "$"
    DESTRUCTURE = "@"


@dataclass(frozen=True)
class TextToken:
    """Literal text between holes (escapes already resolved)."""

    text: str


@dataclass(frozen=True)
class PropertyToken:
    """A named hole in the template.

    Attributes:
        property_name: Name of the property substituted into the hole.
        raw_text: The hole exactly as written, braces included.
        format: Optional format specifier after ``:``.
        alignment: Optional width; negative values align left.
        destructuring: Capture hint from the ``@`` / ``$`` prefix.
    """

    property_name: str
    raw_text: str
    format: str | None = None
    alignment: int | None = None
    destructuring: Destructuring = Destructuring.DEFAULT


MessageTemplateToken: TypeAlias = TextToken | PropertyToken


def _parse_hole(raw: str) -> PropertyToken | None:
    """Parse the inside of ``{...}``; return None if it is not a valid hole."""
    content = raw[1:-1]
    destructuring = Destructuring.DEFAULT
    if content[:1] in ("@", "$"):
        destructuring = Destructuring(content[0])
        content = content[1:]

    fmt: str | None = None
    if ":" in content:
        content, fmt = content.split(":", 1)

    alignment: int | None = None
    if "," in content:
        content, align_text = content.split(",", 1)
        if not _ALIGNMENT.match(align_text.strip()):
            return None
        alignment = int(align_text.strip())

    if not _PROPERTY_NAME.match(content):
        return None
    return PropertyToken(
        property_name=content,
        raw_text=raw,
        format=fmt,
        alignment=alignment,
        destructuring=destructuring,
    )


def parse(text: str) -> tuple[MessageTemplateToken, ...]:
    """Split template text into text and property tokens.

    Adjacent literal text is merged into a single TextToken.
    """
    tokens: list[MessageTemplateToken] = []
    buffer: list[str] = []
    i = 0
    length = len(text)

    def flush_text() -> None:
        if buffer:
            tokens.append(TextToken("".join(buffer)))
            buffer.clear()

    while i < length:
        ch = text[i]
        if ch == "{":
            if text.startswith("{{", i):
                buffer.append("{")
                i += 2
                continue
            end = text.find("}", i + 1)
            nested = text.find("{", i + 1)
            if end == -1 or (nested != -1 and nested < end):
                # unterminated hole, or a new one opens first
                stop = length if end == -1 else nested
                buffer.append(text[i:stop])
                i = stop
                continue
            raw = text[i : end + 1]
            token = _parse_hole(raw)
            if token is None:
                buffer.append(raw)
            else:
                flush_text()
                tokens.append(token)
            i = end + 1
        elif ch == "}":
            buffer.append("}")
            i += 2 if text.startswith("}}", i) else 1
        else:
            buffer.append(ch)
            i += 1

    flush_text()
    return tuple(tokens)


class MessageTemplate:
    """Raw template text plus its lazily parsed tokens.

    Instances are immutable; the parsed token list is computed once.
    """

    def __init__(self, text: str) -> None:
        if text is None:
            raise TypeError("text must not be None")
        self.text = text

    @cached_property
    def tokens(self) -> tuple[MessageTemplateToken, ...]:
        return parse(self.text)

    @property
    def property_tokens(self) -> tuple[PropertyToken, ...]:
        return tuple(t for t in self.tokens if isinstance(t, PropertyToken))

    def render(
        self,
        properties: Mapping[str, StructuredValue],
        format_provider: FormatProvider | None = None,
    ) -> str:
        """Render the template against event properties."""
        return render(self, properties, format_provider)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageTemplate):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __repr__(self) -> str:
        return f"MessageTemplate({self.text!r})"

    def __str__(self) -> str:
        return self.text


def _zero_padded(value: int | float | Decimal, int_digits: int, decimals: int) -> str:
    text = f"{abs(value):.{decimals}f}"
    whole, dot, fraction = text.partition(".")
    sign = "-" if value < 0 and text.strip("0.") else ""
    return sign + whole.zfill(int_digits) + dot + fraction


def _format_number(value: int | float | Decimal, fmt: str) -> str | None:
    """Apply a zero-pad pattern or a standard numeric format, else None."""
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    match = _ZERO_PATTERN.match(fmt)
    if match:
        return _zero_padded(value, len(match.group(1)), len(match.group(2) or ""))
    match = _STANDARD_NUMERIC.match(fmt)
    if match is None:
        return None
    kind, digits = match.group(1).upper(), match.group(2)
    if kind in "NF":
        precision = int(digits) if digits else 2
        return format(value, f"{',' if kind == 'N' else ''}.{precision}f")
    if not isinstance(value, int):
        return None
    width = int(digits) if digits else 1
    if kind == "D":
        return _zero_padded(value, width, 0)
    return format(value, f"0{width}{match.group(1)}")


def _format_scalar(
    value: object, fmt: str | None, format_provider: FormatProvider | None
) -> str:
    if format_provider is not None:
        provided = format_provider(value, fmt)
        if provided is not None:
            return provided
    if fmt and value is not None and not isinstance(value, (bool, str)):
        if isinstance(value, (int, float, Decimal)):
            numeric = _format_number(value, fmt)
            if numeric is not None:
                return numeric
        try:
            return format(value, fmt)
        except (TypeError, ValueError):
            pass
    return render_scalar(value)


def _align(text: str, alignment: int | None) -> str:
    if alignment is None:
        return text
    if alignment < 0:
        return text.ljust(-alignment)
    return text.rjust(alignment)


def render_token(
    token: PropertyToken,
    properties: Mapping[str, StructuredValue],
    format_provider: FormatProvider | None = None,
) -> str:
    """Render one hole.

    Scalars render as plain text (format specifier applied when it fits the
    value); sequences, dictionaries and structures render as compact JSON.
    A hole without a matching property renders as its raw text.
    """
    value = properties.get(token.property_name)
    if value is None:
        return token.raw_text
    if isinstance(value, ScalarValue):
        text = _format_scalar(value.value, token.format, format_provider)
    else:
        text = to_compact_json(value)
    return _align(text, token.alignment)


def render(
    template: MessageTemplate,
    properties: Mapping[str, StructuredValue],
    format_provider: FormatProvider | None = None,
) -> str:
    """Substitute every hole of the template with its property's text."""
    parts: list[str] = []
    for token in template.tokens:
        if isinstance(token, TextToken):
            parts.append(token.text)
        else:
            parts.append(render_token(token, properties, format_provider))
    return "".join(parts)
