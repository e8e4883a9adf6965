"""Tests for message template parsing and rendering."""

import pytest

from insightipy.core.templates import (
    Destructuring,
    MessageTemplate,
    PropertyToken,
    TextToken,
    parse,
)
from insightipy.core.values import ScalarValue, SequenceValue, structure


@pytest.mark.core
class TestParse:
    """Tests for template parsing."""

    def test_plain_text(self) -> None:
        assert parse("just text") == (TextToken("just text"),)

    def test_empty_template(self) -> None:
        assert parse("") == ()

    def test_holes_and_text(self) -> None:
        tokens = parse("Processed {@Position} in {Elapsed:000} ms.")

        assert tokens == (
            TextToken("Processed "),
            PropertyToken(
                property_name="Position",
                raw_text="{@Position}",
                destructuring=Destructuring.DESTRUCTURE,
            ),
            TextToken(" in "),
            PropertyToken(property_name="Elapsed", raw_text="{Elapsed:000}", format="000"),
            TextToken(" ms."),
        )

    def test_stringify_and_alignment(self) -> None:
        (token,) = parse("{$Name,-10}")
        assert isinstance(token, PropertyToken)
        assert token.destructuring is Destructuring.STRINGIFY
        assert token.alignment == -10

    def test_escaped_braces_are_text(self) -> None:
        assert parse("{{literal}}") == (TextToken("{literal}"),)

    @pytest.mark.parametrize("text", ["{not valid}", "{Name,abc}", "{}", "{open"])
    def test_malformed_holes_are_text(self, text: str) -> None:
        assert parse(text) == (TextToken(text),)

    def test_nested_open_brace_keeps_text(self) -> None:
        tokens = parse("a {b {Name}")
        assert tokens[0] == TextToken("a {b ")
        assert isinstance(tokens[1], PropertyToken)


@pytest.mark.core
class TestMessageTemplate:
    """Tests for MessageTemplate."""

    def test_none_text_raises(self) -> None:
        with pytest.raises(TypeError):
            MessageTemplate(None)  # type: ignore[arg-type]

    def test_equality_by_text(self) -> None:
        assert MessageTemplate("a {B}") == MessageTemplate("a {B}")
        assert hash(MessageTemplate("a")) == hash(MessageTemplate("a"))
        assert str(MessageTemplate("a {B}")) == "a {B}"

    def test_property_tokens(self) -> None:
        template = MessageTemplate("{A} and {B}")
        assert [t.property_name for t in template.property_tokens] == ["A", "B"]

    def test_tokens_are_parsed_once(self) -> None:
        template = MessageTemplate("{A}")
        assert template.tokens is template.tokens


@pytest.mark.core
class TestRender:
    """Tests for template rendering."""

    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Templates.DestructuredAsJson")
    def test_destructured_structure_renders_as_compact_json(self) -> None:
        template = MessageTemplate("Hello, {@Name}")
        properties = {"Name": structure(Foo=ScalarValue("foo"), Bar=ScalarValue(123))}

        assert template.render(properties) == 'Hello, {"Foo":"foo","Bar":123}'

    def test_strings_render_without_quotes(self) -> None:
        template = MessageTemplate("Hello {Name}")
        assert template.render({"Name": ScalarValue("world")}) == "Hello world"

    def test_sequence_renders_as_json(self) -> None:
        template = MessageTemplate("{Items}")
        value = SequenceValue((ScalarValue(1), ScalarValue("a")))
        assert template.render({"Items": value}) == '[1,"a"]'

    def test_missing_property_renders_raw_hole(self) -> None:
        assert MessageTemplate("Hi {Name:x}").render({}) == "Hi {Name:x}"

    def test_format_spec_is_applied(self) -> None:
        template = MessageTemplate("{Elapsed:03} ms, {Ratio:.2f}")
        properties = {"Elapsed": ScalarValue(34), "Ratio": ScalarValue(0.5)}
        assert template.render(properties) == "034 ms, 0.50"

    @pytest.mark.parametrize(
        ("text", "value", "expected"),
        [
            ("{V:000}", 34, "034"),
            ("{V:000}", -5, "-005"),
            ("{V:0.00}", 1.5, "1.50"),
            ("{V:N2}", 1234.5, "1,234.50"),
            ("{V:F1}", 2, "2.0"),
            ("{V:D4}", 42, "0042"),
            ("{V:X4}", 255, "00FF"),
        ],
    )
    def test_numeric_format_patterns(
        self, text: str, value: object, expected: str
    ) -> None:
        assert MessageTemplate(text).render({"V": ScalarValue(value)}) == expected

    def test_integer_only_format_on_float_uses_default_text(self) -> None:
        assert MessageTemplate("{V:D4}").render({"V": ScalarValue(1.5)}) == "1.5"

    def test_unusable_format_spec_falls_back(self) -> None:
        template = MessageTemplate("{Flag:000}")
        assert template.render({"Flag": ScalarValue(True)}) == "true"

    def test_alignment(self) -> None:
        template = MessageTemplate("[{A,5}][{B,-5}]")
        properties = {"A": ScalarValue("x"), "B": ScalarValue("y")}
        assert template.render(properties) == "[    x][y    ]"

    def test_format_provider_overrides(self) -> None:
        def provider(value: object, spec: str | None) -> str | None:
            return "forty-two" if value == 42 else None

        template = MessageTemplate("{A} {B}")
        properties = {"A": ScalarValue(42), "B": ScalarValue(7)}
        assert template.render(properties, provider) == "forty-two 7"

    def test_escaped_braces_render_literally(self) -> None:
        assert MessageTemplate("{{A}} {A}").render({"A": ScalarValue(1)}) == "{A} 1"
