"""Paced stream consumer.

Drains a push source one unit at a time. Whenever the per-unit callback
returns an awaitable, the source is paused until that awaitable settles,
so at most one unit of work is outstanding at any time. All invocations
share one ProcessContext which becomes the operation's result.
"""

import asyncio
import functools
import inspect
import logging
from collections import deque
from types import SimpleNamespace
from typing import Any, Awaitable, Callable, Deque, Optional, Union

from ..config import ProcessState
from ..errors import CallbackFailure, SourceFailure, chain
from .source import IterableSource, PushSource

logger = logging.getLogger(__name__)

ProcessCallback = Callable[[Any, Any, int, Any], Union[None, Awaitable[Any]]]


class ProcessContext(SimpleNamespace):
    """Accumulator shared by all per-unit callbacks of one process() call."""


def default_processor(context: ProcessContext, unit: Any, index: int, source: Any) -> None:
    """Collect every unit in ``context.collected``."""
    if not hasattr(context, 'collected'):
        context.collected = []
    context.collected.append(unit)


def _is_push_source(source: Any) -> bool:
    return isinstance(source, PushSource) or all(
        callable(getattr(source, name, None))
        for name in ('on', 'pause', 'resume', 'is_paused')
    )


class PacedStreamConsumer:
    """State machine consuming a push source with backpressure.

    Idle -> Draining -> {Draining, AwaitingCallback} -> ... -> Finished | Failed

    ``end`` and ``error`` signals arriving while a callback is still
    pending are deferred until it settles. Units a source delivers while
    paused are queued and processed in order afterwards.
    """

    def __init__(self, source: Any, callback: Optional[ProcessCallback] = None):
        """Initialize consumer.

        Args:
            source: Push source to drain
            callback: Invoked as callback(context, unit, index, source);
                defaults to collecting units in ``context.collected``
        """
        self.source = source
        self.callback = callback or default_processor
        self.context = ProcessContext()
        self.state = ProcessState.IDLE
        self.counter = 0
        self.finished = False
        self.failure: Optional[SourceFailure] = None
        self._backlog: Deque[Any] = deque()
        self._result: Optional[asyncio.Future] = None

    async def run(self) -> ProcessContext:
        """Drain the source until it ends or fails.

        Returns:
            The shared process context
        """
        self._result = asyncio.get_running_loop().create_future()

        self.source.on('data', self._on_data)
        self.source.on('error', self._on_error)
        self.source.on('end', self._on_end)

        self._transition(ProcessState.DRAINING)
        self.source.resume()

        try:
            return await self._result
        finally:
            self._detach()

    def _transition(self, state: ProcessState):
        logger.debug("Stream consumer %s -> %s", self.state.value, state.value)
        self.state = state

    def _detach(self):
        remove = getattr(self.source, 'remove_listener', None)
        if remove is None:
            return
        remove('data', self._on_data)
        remove('error', self._on_error)
        remove('end', self._on_end)

    def _finish(self):
        self._transition(ProcessState.FINISHED)
        if not self._result.done():
            self._result.set_result(self.context)

    def _fail(self, error: BaseException):
        self._transition(ProcessState.FAILED)
        if not self._result.done():
            self._result.set_exception(error)

    def _on_data(self, unit: Any):
        if self.state.is_terminal or self._result.done():
            return

        if self.state is ProcessState.AWAITING_CALLBACK:
            self._backlog.append(unit)
            return

        self._step(unit)

    def _step(self, unit: Any):
        """Process a single unit, pausing the source on pending work."""
        index = self.counter
        self.counter += 1

        try:
            result = self.callback(self.context, unit, index, self.source)
        except Exception as e:
            self.source.pause()
            self._fail(chain(CallbackFailure(e, index), e))
            return

        if inspect.isawaitable(result):
            self.source.pause()
            self._transition(ProcessState.AWAITING_CALLBACK)

            pending = asyncio.ensure_future(result)
            pending.add_done_callback(functools.partial(self._on_settled, index))

    def _on_settled(self, index: int, pending: asyncio.Future):
        if self.state.is_terminal or self._result.done():
            return

        if pending.cancelled():
            error = asyncio.CancelledError()
        else:
            error = pending.exception()

        if error is not None:
            self._fail(chain(CallbackFailure(error, index), error))
            return

        self._transition(ProcessState.DRAINING)

        while self._backlog and self.state is ProcessState.DRAINING:
            self._step(self._backlog.popleft())

        if self.state is not ProcessState.DRAINING:
            return

        self.source.resume()
        self._settle_deferred()

    def _settle_deferred(self):
        if self.state is not ProcessState.DRAINING:
            return
        if self.finished:
            self._finish()
        elif self.failure is not None:
            self._fail(self.failure)

    def _on_error(self, error: Any):
        self.failure = chain(SourceFailure(error, self.counter), error)
        if self.state is ProcessState.DRAINING:
            self._fail(self.failure)

    def _on_end(self):
        self.finished = True
        if self.state is ProcessState.DRAINING and not self._backlog:
            self._finish()


async def process(source: Any, callback: Optional[ProcessCallback] = None) -> ProcessContext:
    """Process units read from a push source one at a time.

    The callback is invoked as ``callback(context, unit, index, source)``.
    If it raises or returns an awaitable that fails, processing is aborted
    and the source is left paused. A source built here from an iterable is
    closed once processing settles, whatever the outcome.

    Args:
        source: Push source, or any sync/async iterable to wrap in one
        callback: Per-unit worker; defaults to collecting all units in
            ``context.collected``

    Returns:
        The context shared by all callback invocations
    """
    owned = not _is_push_source(source)
    if owned:
        if not (hasattr(source, '__aiter__') or hasattr(source, '__iter__')):
            raise TypeError(f"cannot process {type(source).__name__!r}: not a push source or iterable")
        source = IterableSource(source)

    try:
        return await PacedStreamConsumer(source, callback).run()
    finally:
        if owned:
            source.close()
