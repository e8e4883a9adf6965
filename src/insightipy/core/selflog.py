"""Self-diagnostics channel for the conversion pipeline.

Formatting anomalies (duplicate keys after flattening, values that cannot be
rendered) are reported here instead of being raised. The channel is a
dedicated stdlib logger that does not propagate, so diagnostics never reach
the application's own log stream and cannot loop back into the sink.

Example:
    ```python
    from insightipy.core import selflog

    selflog.enable()  # write diagnostics to stderr
    ```
"""

import logging
import sys
from typing import TextIO

SELFLOG_LOGGER_NAME = "insightipy.selflog"

_logger = logging.getLogger(SELFLOG_LOGGER_NAME)
_logger.propagate = False
_logger.addHandler(logging.NullHandler())

_handler: logging.Handler | None = None


def enable(stream: TextIO | None = None, level: int = logging.DEBUG) -> logging.Handler:
    """Start writing diagnostics to a stream.

    Args:
        stream: Output stream. Defaults to sys.stderr.
        level: Minimum level written to the stream.

    Returns:
        The installed handler.
    """
    global _handler
    disable()
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    _logger.addHandler(_handler)
    _logger.setLevel(level)
    return _handler


def disable() -> None:
    """Stop writing diagnostics to the stream installed by enable()."""
    global _handler
    if _handler is not None:
        _logger.removeHandler(_handler)
        _handler = None


def write_line(fmt: str, *args: object) -> None:
    """Write one diagnostic line, %-formatted lazily like logging calls."""
    _logger.warning(fmt, *args)
