"""BDD step definitions for conversion features."""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when
from tests.helpers import make_event, raised

from insightipy.adapters.sink import TelemetrySink
from insightipy.adapters.transports.in_memory import InMemoryTelemetryTransport
from insightipy.core.converters import (
    EventTelemetryConverter,
    TelemetryConverterBase,
    TraceTelemetryConverter,
)
from insightipy.core.exceptions import SinkDisposedError
from insightipy.core.models import LogEvent, LogEventLevel, TelemetryRecord
from insightipy.core.templates import FormatProvider, MessageTemplate
from insightipy.core.values import ScalarValue, structure


class DuplicatingConverter(TraceTelemetryConverter):
    """Yields every record twice."""

    def convert(
        self, log_event: LogEvent, format_provider: FormatProvider | None = None
    ) -> Iterator[TelemetryRecord]:
        for record in super().convert(log_event, format_provider):
            yield record
            yield self.to_default_telemetry(log_event, format_provider)


@dataclass
class ConversionScenarioContext:
    """Shared state for one conversion scenario."""

    transport: InMemoryTelemetryTransport | None = None
    converter: TelemetryConverterBase | None = None
    sink: TelemetrySink | None = None
    errors: list[Exception] = field(default_factory=list)

    def get_sink(self) -> TelemetrySink:
        if self.sink is None:
            assert self.transport is not None
            self.sink = TelemetrySink(self.transport, self.converter)
        return self.sink

    def emit(self, event: LogEvent) -> None:
        try:
            self.get_sink().emit(event)
        except SinkDisposedError as e:
            self.errors.append(e)

    @property
    def records(self) -> list[TelemetryRecord]:
        assert self.transport is not None
        return self.transport.records


@pytest.fixture
def ctx() -> ConversionScenarioContext:
    """Fresh scenario context for each test."""
    return ConversionScenarioContext()


# === Given ===
@given("an in-memory transport")
def step_transport(ctx: ConversionScenarioContext) -> None:
    ctx.transport = InMemoryTelemetryTransport()


@given("a trace converter")
def step_trace_converter(ctx: ConversionScenarioContext) -> None:
    ctx.converter = TraceTelemetryConverter()


@given("an event converter")
def step_event_converter(ctx: ConversionScenarioContext) -> None:
    ctx.converter = EventTelemetryConverter()


@given("a converter that duplicates every record")
def step_duplicating_converter(ctx: ConversionScenarioContext) -> None:
    ctx.converter = DuplicatingConverter()


@given("the sink is closed")
def step_sink_closed(ctx: ConversionScenarioContext) -> None:
    ctx.get_sink().close()


# === When ===
@when(parsers.parse('an {level} event with template "{template}" is emitted'))
def step_emit(ctx: ConversionScenarioContext, level: str, template: str) -> None:
    ctx.emit(make_event(template, LogEventLevel[level.upper()]))


@when(
    parsers.parse(
        'an {level} event with template "{template}" is emitted with property '
        '"{name}" = "{value}"'
    )
)
def step_emit_with_property(
    ctx: ConversionScenarioContext, level: str, template: str, name: str, value: str
) -> None:
    ctx.emit(make_event(template, LogEventLevel[level.upper()], {name: value}))


@when(
    parsers.parse(
        'an {level} event with template "{template}" and a structure Name of '
        'Foo "{foo}" and Bar {bar:d} is emitted'
    )
)
def step_emit_with_structure(
    ctx: ConversionScenarioContext, level: str, template: str, foo: str, bar: int
) -> None:
    event = LogEvent(
        timestamp=make_event().timestamp,
        level=LogEventLevel[level.upper()],
        message_template=MessageTemplate(template),
        properties={"Name": structure(Foo=ScalarValue(foo), Bar=ScalarValue(bar))},
    )
    ctx.emit(event)


@when(parsers.parse('an {level} event with template "{template}" and an exception is emitted'))
def step_emit_with_exception(
    ctx: ConversionScenarioContext, level: str, template: str
) -> None:
    error = raised(RuntimeError("boom"))
    ctx.emit(make_event(template, LogEventLevel[level.upper()], exception=error))


# === Then ===
@then(parsers.parse("{count:d} {kind} record is tracked"))
@then(parsers.parse("{count:d} {kind} records are tracked"))
def step_record_count(ctx: ConversionScenarioContext, count: int, kind: str) -> None:
    assert len(ctx.records) == count
    assert all(record.kind == kind for record in ctx.records)


@then(parsers.parse('every record has message "{message}"'))
def step_every_message(ctx: ConversionScenarioContext, message: str) -> None:
    assert ctx.records
    assert all(getattr(r, "message", None) == message for r in ctx.records)


@then(parsers.parse('the first record has property "{name}" equal to "{value}"'))
def step_first_property(ctx: ConversionScenarioContext, name: str, value: str) -> None:
    assert ctx.records[0].properties[name] == value


@then(parsers.parse('the first record has operation id "{operation_id}"'))
def step_operation_id(ctx: ConversionScenarioContext, operation_id: str) -> None:
    assert ctx.records[0].context.operation_id == operation_id


@then("the emit fails because the sink is closed")
def step_emit_failed(ctx: ConversionScenarioContext) -> None:
    assert len(ctx.errors) == 1
    assert isinstance(ctx.errors[0], SinkDisposedError)
