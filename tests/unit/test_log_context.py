"""Tests for the contextvars-backed log context."""

import asyncio

import pytest

from insightipy.adapters.log_context import (
    clear_log_context,
    get_log_context,
    push_property,
    set_log_context,
    update_log_context,
)


@pytest.mark.core
class TestLogContext:
    """Tests for log context helpers."""

    def test_empty_by_default(self) -> None:
        assert get_log_context() == {}

    def test_update_and_clear(self) -> None:
        update_log_context(a=1)
        update_log_context(b=2)
        assert get_log_context() == {"a": 1, "b": 2}

        clear_log_context()
        assert get_log_context() == {}

    def test_set_replaces(self) -> None:
        update_log_context(a=1)
        set_log_context({"b": 2})
        assert get_log_context() == {"b": 2}

    def test_get_returns_copy(self) -> None:
        update_log_context(a=1)
        get_log_context()["a"] = 99
        assert get_log_context() == {"a": 1}

    def test_push_property_restores_on_exit(self) -> None:
        update_log_context(a=1)
        with push_property("operationId", "op"):
            assert get_log_context() == {"a": 1, "operationId": "op"}
        assert get_log_context() == {"a": 1}

    def test_push_property_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with push_property("operationId", "op"):
                raise RuntimeError("inside")
        assert get_log_context() == {}

    async def test_tasks_are_isolated(self) -> None:
        async def in_task(value: str) -> dict:
            with push_property("operationId", value):
                await asyncio.sleep(0)
                return get_log_context()

        first, second = await asyncio.gather(in_task("a"), in_task("b"))

        assert first == {"operationId": "a"}
        assert second == {"operationId": "b"}
