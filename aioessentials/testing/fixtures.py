"""Test fixtures for aioessentials consumers.

These helpers make it easy to observe ordering and overlap of callback
invocations and to drive push sources by hand in test suites.
"""

import asyncio
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional, Tuple

from ..promises import delay
from ..streams.source import PushSource


class RecordingCallback:
    """Iteration callback recording every invocation.

    Tracks how many invocations are in flight at once, so tests can assert
    that sequential operations never overlap and concurrent ones do.

    Example:
        callback = RecordingCallback(lambda value, key, items: value * 2, delay_ms=5)
        await aioessentials.map([1, 2, 3], callback)
        assert callback.keys == [0, 1, 2]
        assert callback.max_active == 1
    """

    def __init__(
        self,
        fn: Optional[Callable[[Any, Any, Any], Any]] = None,
        delay_ms: Optional[float] = None
    ):
        """Initialize recorder.

        Args:
            fn: Computes the callback result, defaults to returning the value
            delay_ms: If set, every invocation settles asynchronously after
                this many milliseconds
        """
        self.fn = fn or (lambda value, key, container: value)
        self.delay_ms = delay_ms
        self.calls: List[Tuple[Any, Any, Any]] = []
        self.active = 0
        self.max_active = 0

    @property
    def keys(self) -> List[Any]:
        return [key for _, key, _ in self.calls]

    @property
    def values(self) -> List[Any]:
        return [value for value, _, _ in self.calls]

    def __call__(self, value: Any, key: Any, container: Any) -> Any:
        self.calls.append((value, key, container))

        if self.delay_ms is None:
            return self.fn(value, key, container)

        return self._delayed(value, key, container)

    async def _delayed(self, value: Any, key: Any, container: Any) -> Any:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await delay(self.delay_ms)
            return self.fn(value, key, container)
        finally:
            self.active -= 1


def pending_value(value: Any, delay_ms: float = 20) -> asyncio.Future:
    """Create a future resolving with value after a delay.

    Futures can be awaited repeatedly, so containers holding them may be
    traversed more than once. Must be called while a loop is running.
    """
    return asyncio.ensure_future(delay(delay_ms, value))


def failing_value(error: BaseException, delay_ms: float = 0) -> asyncio.Future:
    """Create a future failing with error after a delay."""
    async def fail():
        await delay(delay_ms)
        raise error

    future = asyncio.ensure_future(fail())
    # Tests may never get to await it
    future.add_done_callback(lambda f: f.cancelled() or f.exception())
    return future


async def items_failing_at(
    items: Iterable[Any],
    fail_at: int,
    error: BaseException
) -> AsyncIterator[Any]:
    """Yield items, raising error instead of yielding the item at fail_at."""
    for index, item in enumerate(items):
        if index == fail_at:
            raise error
        yield item


class ManualSource(PushSource):
    """Push source driven explicitly by a test.

    Records every pause/resume transition in ``transitions``. Nothing is
    ever emitted on its own.
    """

    def __init__(self):
        super().__init__()
        self.transitions: List[str] = []

    def _on_resume(self):
        self.transitions.append('resume')

    def _on_pause(self):
        self.transitions.append('pause')

    def push(self, unit: Any) -> bool:
        return self.emit('data', unit)

    def end(self) -> bool:
        return self.emit('end')

    def fail(self, error: Any) -> bool:
        return self.emit('error', error)
