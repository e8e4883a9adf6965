"""Ambient log context backed by contextvars.

Properties pushed here are attached to every log event the
TelemetryHandler builds on the same thread or asyncio task, e.g. an
``operationId`` for distributed-trace correlation.

Example:
    ```python
    from insightipy.adapters.log_context import push_property

    with push_property("operationId", request_id):
        logger.info("handled request")
    ```
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "insightipy_log_context", default=None
)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current context properties."""
    return dict(_log_context.get() or {})


def set_log_context(properties: dict[str, Any]) -> None:
    """Replace the current context properties."""
    _log_context.set(dict(properties))


def update_log_context(**properties: Any) -> None:
    """Add or overwrite properties in the current context."""
    _log_context.set({**(_log_context.get() or {}), **properties})


def clear_log_context() -> None:
    """Remove every property from the current context."""
    _log_context.set(None)


@contextmanager
def push_property(name: str, value: Any) -> Iterator[None]:
    """Attach a property for the duration of the with-block.

    The previous context is restored on exit, including when the block
    raises.
    """
    token = _log_context.set({**(_log_context.get() or {}), name: value})
    try:
        yield
    finally:
        _log_context.reset(token)
