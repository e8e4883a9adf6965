"""Sink dispatcher: the entry point invoked once per log event.

The sink hands each event to its converter and passes every produced record
to the transport, in the order the converter produced them. It owns the
shutdown lifecycle: ``close()`` flushes the transport once and then rejects
any further use.

Example:
    ```python
    from insightipy import TelemetrySink, TraceTelemetryConverter
    from insightipy.adapters.transports import InMemoryTelemetryTransport

    transport = InMemoryTelemetryTransport()
    with TelemetrySink(transport, TraceTelemetryConverter()) as sink:
        sink.emit(log_event)
    ```
"""

import threading
from collections.abc import Iterable
from types import TracebackType

from insightipy.core.context import ApplicationVersionContextInitializer
from insightipy.core.converters import TraceTelemetryConverter
from insightipy.core.exceptions import SinkDisposedError
from insightipy.core.models import LogEvent, TelemetryRecord
from insightipy.core.options import SinkOptions
from insightipy.core.ports import (
    ContextInitializerPort,
    TelemetryConverterPort,
    TelemetryTransportPort,
)
from insightipy.core.templates import FormatProvider


class TelemetrySink:
    """Converts log events and tracks the resulting telemetry records.

    Safe for concurrent ``emit`` calls: the converter, formatter and transport
    are shared read-only, every record is built by and owned by one call.
    Converter exceptions propagate to the caller unchanged; the logging
    front-end decides whether to drop them.

    Args:
        transport: Receives every produced record.
        converter: Turns events into records. Defaults to traces.
        format_provider: Passed through to message rendering.
        context_initializers: Applied to each record's context before it is
            tracked.
    """

    def __init__(
        self,
        transport: TelemetryTransportPort,
        converter: TelemetryConverterPort | None = None,
        format_provider: FormatProvider | None = None,
        context_initializers: Iterable[ContextInitializerPort] = (),
    ) -> None:
        if transport is None:
            raise TypeError("transport must not be None")
        self._transport = transport
        self._converter = converter or TraceTelemetryConverter()
        self._format_provider = format_provider
        self._context_initializers = tuple(context_initializers)
        self._disposed = threading.Event()
        self._disposing = threading.Event()
        # never released: acquiring it claims disposal exactly once
        self._dispose_claim = threading.Lock()

    @property
    def is_disposed(self) -> bool:
        return self._disposed.is_set()

    @property
    def is_disposing(self) -> bool:
        return self._disposing.is_set()

    def _check_not_disposed(self) -> None:
        if self._disposed.is_set():
            raise SinkDisposedError(type(self).__name__)

    @property
    def transport(self) -> TelemetryTransportPort:
        self._check_not_disposed()
        return self._transport

    @property
    def converter(self) -> TelemetryConverterPort:
        self._check_not_disposed()
        return self._converter

    @property
    def format_provider(self) -> FormatProvider | None:
        self._check_not_disposed()
        return self._format_provider

    def track(self, record: TelemetryRecord) -> None:
        """Initialize a record's context and hand it to the transport.

        Raises:
            TypeError: If record is None.
            SinkDisposedError: If the sink is closed.
        """
        if record is None:
            raise TypeError("record must not be None")
        self._check_not_disposed()
        self._track(record)

    def _track(self, record: TelemetryRecord) -> None:
        for initializer in self._context_initializers:
            initializer.initialize(record.context)
        self._transport.track(record)

    def emit(self, log_event: LogEvent) -> None:
        """Convert one log event and track every record it produces.

        An empty conversion result drops the event silently. None entries in
        the result are skipped. No new emit starts once close() has begun;
        emits already running finish against the transport.

        Raises:
            TypeError: If log_event is None.
            SinkDisposedError: If the sink is closed.
        """
        if log_event is None:
            raise TypeError("log_event must not be None")
        self._check_not_disposed()
        if self._disposing.is_set():
            raise SinkDisposedError(type(self).__name__)

        for record in self._converter.convert(log_event, self._format_provider):
            if record is not None:
                self._track(record)

    def close(self) -> None:
        """Flush the transport and mark the sink closed.

        Idempotent. Concurrent callers return immediately while the first
        one flushes. The sink is marked closed even if the flush fails.
        """
        if self._disposed.is_set():
            return
        if not self._dispose_claim.acquire(blocking=False):
            return
        self._disposing.set()
        try:
            self._transport.flush()
        finally:
            self._disposed.set()
            self._disposing.clear()

    def __enter__(self) -> "TelemetrySink":
        self._check_not_disposed()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def create_sink(
    transport: TelemetryTransportPort,
    options: SinkOptions | None = None,
    format_provider: FormatProvider | None = None,
    context_initializers: Iterable[ContextInitializerPort] = (),
) -> TelemetrySink:
    """Build a sink from SinkOptions.

    Args:
        transport: Receives every produced record.
        options: Converter and formatter selection. Defaults to SinkOptions().
        format_provider: Passed through to message rendering.
        context_initializers: Extra initializers, applied after the
            application version initializer built from the options.

    Returns:
        A ready-to-use TelemetrySink.
    """
    options = options or SinkOptions()
    initializers: list[ContextInitializerPort] = []
    if options.application_version is not None:
        initializers.append(
            ApplicationVersionContextInitializer(options.application_version)
        )
    initializers.extend(context_initializers)
    return TelemetrySink(
        transport,
        converter=options.build_converter(),
        format_provider=format_provider,
        context_initializers=initializers,
    )
