"""Tests for bridle._internal.invoke — sync/async handler adaptation."""

import inspect

from bridle._internal.invoke import ensure_async, invoke


async def _async_double(x: int) -> int:
    return x * 2


def _sync_double(x: int) -> int:
    return x * 2


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(_sync_double, 2) == 4

    async def test_async(self) -> None:
        assert await invoke(_async_double, 3) == 6

    async def test_kwargs(self) -> None:
        assert await invoke(_sync_double, x=5) == 10


class TestEnsureAsync:
    def test_coroutine_function_unchanged(self) -> None:
        assert ensure_async(_async_double) is _async_double

    async def test_sync_wrapped(self) -> None:
        wrapped = ensure_async(_sync_double)
        assert inspect.iscoroutinefunction(wrapped)
        assert await wrapped(4) == 8

    def test_wrapper_keeps_name(self) -> None:
        assert ensure_async(_sync_double).__name__ == "_sync_double"

    async def test_callable_object(self) -> None:
        class Handler:
            async def __call__(self, x: int) -> int:
                return x + 1

        wrapped = ensure_async(Handler())
        assert await wrapped(1) == 2
