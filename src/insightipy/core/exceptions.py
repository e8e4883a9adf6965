"""insightipy exception hierarchy.

Contract violations (a required argument is None, an exception record is
requested for an event without an exception) use the builtin ``TypeError``
and ``ValueError``. The classes here cover lifecycle and configuration
failures that callers may want to catch specifically.

Usage:
    from insightipy.core.exceptions import SinkDisposedError

    try:
        sink.emit(log_event)
    except SinkDisposedError:
        ...
"""


class InsightipyError(Exception):
    """Base exception for all insightipy errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SinkDisposedError(InsightipyError):
    """A sink was used after it was closed.

    Signals a lifecycle bug in the host: log events keep arriving after
    shutdown flushed the transport.
    """

    def __init__(self, sink_name: str) -> None:
        self.sink_name = sink_name
        super().__init__(f"Cannot access a closed sink: {sink_name}")


class ConfigurationError(InsightipyError):
    """Invalid sink configuration.

    Raised when options name an unknown telemetry kind or an environment
    variable cannot be parsed.
    """
