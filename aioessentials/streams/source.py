"""Push-style data sources.

A push source delivers units through ``data`` events, signals exhaustion
with ``end`` and failures with ``error``. Consumers throttle it with
``pause()``/``resume()``. Sources start paused; the first ``resume()``
puts them into flowing mode.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union, AsyncIterable, Iterable

logger = logging.getLogger(__name__)


class PushSource(ABC):
    """Abstract base class for push sources.

    Provides the listener registry and the paused flag. Subclasses decide
    how units are produced by reacting to pause/resume transitions.
    """

    EVENTS = ('data', 'error', 'end')

    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = {event: [] for event in self.EVENTS}
        self._paused = True

    def on(self, event: str, handler: Callable[..., Any]) -> 'PushSource':
        """Register a listener for an event.

        Args:
            event: One of 'data', 'error' or 'end'
            handler: Called with the event's arguments

        Returns:
            This source for chaining
        """
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event}")
        self._listeners[event].append(handler)
        return self

    def remove_listener(self, event: str, handler: Callable[..., Any]) -> 'PushSource':
        """Unregister a previously registered listener."""
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        return self

    def emit(self, event: str, *args: Any) -> bool:
        """Deliver an event to its listeners.

        Returns:
            True if the event had listeners
        """
        handlers = list(self._listeners[event])
        for handler in handlers:
            handler(*args)
        return bool(handlers)

    def pause(self) -> 'PushSource':
        """Stop delivering data events until resumed."""
        if not self._paused:
            self._paused = True
            self._on_pause()
        return self

    def resume(self) -> 'PushSource':
        """Switch into flowing mode."""
        if self._paused:
            self._paused = False
            self._on_resume()
        return self

    def is_paused(self) -> bool:
        return self._paused

    @abstractmethod
    def _on_resume(self):
        """React to switching into flowing mode."""
        pass

    def _on_pause(self):
        """React to being paused."""
        pass


class IterableSource(PushSource):
    """Push source draining a sync or async iterable.

    The next item is never pulled from the iterable while the source is
    paused. Exhaustion is signalled with ``end`` and an exception raised by
    the iterable with ``error``. Pumping starts on the first resume, which
    must happen while an event loop is running.
    """

    def __init__(self, iterable: Union[Iterable[Any], AsyncIterable[Any]]):
        """Initialize source.

        Args:
            iterable: Items to push, sync or async
        """
        super().__init__()
        self._iterable = iterable
        self._flowing: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None
        self.pushed = 0
        self.ended = False

    def _on_resume(self):
        if self._flowing is None:
            self._flowing = asyncio.Event()
        self._flowing.set()

        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._pump())

    def _on_pause(self):
        if self._flowing is not None:
            self._flowing.clear()

    def close(self):
        """Stop pumping and close the underlying iterable.

        Pending items are dropped and no further event is emitted.
        """
        self.pause()
        if self._task is not None and not self._task.done():
            logger.debug("Closing source after %d item(s)", self.pushed)
            self._task.cancel()

    async def _items(self) -> AsyncIterator[Any]:
        if hasattr(self._iterable, '__aiter__'):
            iterator = self._iterable.__aiter__()
            try:
                async for item in iterator:
                    yield item
            finally:
                if hasattr(iterator, 'aclose'):
                    await iterator.aclose()
        else:
            iterator = iter(self._iterable)
            try:
                for item in iterator:
                    yield item
            finally:
                if hasattr(iterator, 'close'):
                    iterator.close()

    async def _pump(self):
        """Pull items while flowing and push them to the listeners."""
        items = self._items()
        try:
            while True:
                await self._flowing.wait()

                try:
                    item = await items.__anext__()
                except StopAsyncIteration:
                    break
                except Exception as e:
                    logger.debug("Source failed after %d item(s): %s", self.pushed, e)
                    self.emit('error', e)
                    return

                self.pushed += 1
                self.emit('data', item)

                # Let consumers react before pulling the next item
                await asyncio.sleep(0)

            await self._flowing.wait()
            self.ended = True
            self.emit('end')
        finally:
            await items.aclose()
