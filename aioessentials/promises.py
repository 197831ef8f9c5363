"""Small awaitable helpers: delaying and adapting callback-style functions."""

import asyncio
import functools
import logging
import types
from typing import Any, Callable, Optional

from .errors import AdaptedCallFailure, chain

logger = logging.getLogger(__name__)


async def delay(duration_ms: float, payload: Any = None) -> Any:
    """Resolve with payload after at least ``duration_ms`` milliseconds.

    Never fails. Negative durations resolve on the next loop iteration.

    Args:
        duration_ms: Desired delay in milliseconds
        payload: Value to resolve with

    Returns:
        The payload
    """
    loop = asyncio.get_running_loop()
    seconds = max(duration_ms, 0) / 1000
    deadline = loop.time() + seconds

    await asyncio.sleep(seconds)
    # Timers may fire up to one clock tick early
    while loop.time() < deadline:
        await asyncio.sleep(deadline - loop.time())
    return payload


def promisify(fn: Callable, bind_to: Optional[Any] = None) -> Callable[..., asyncio.Future]:
    """Wrap a function reporting its outcome through a trailing callback.

    The wrapped function is invoked immediately with all supplied
    arguments plus a final ``callback(error, result)``. A truthy ``error``
    fails the returned future with AdaptedCallFailure, otherwise it
    resolves with ``result``. The callback may be called from another
    thread; only the first call counts.

    Calls of the wrapper must happen while an event loop is running.

    Args:
        fn: Function to wrap
        bind_to: Object bound as the function's first argument on every
            call. When omitted, a wrapper stored on a class forwards the
            instance it was looked up on, just like a method.

    Returns:
        Function returning an ``asyncio.Future`` instead of taking a callback
    """
    target = fn if bind_to is None else types.MethodType(fn, bind_to)

    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(error: Any, result: Any) -> None:
            if future.done():
                return
            if error:
                logger.debug("Adapted call of %s failed: %r", getattr(fn, "__name__", fn), error)
                future.set_exception(chain(AdaptedCallFailure(error), error))
            else:
                future.set_result(result)

        def callback(error: Any = None, result: Any = None, *_) -> None:
            loop.call_soon_threadsafe(settle, error, result)

        try:
            target(*args, callback, **kwargs)
        except Exception as e:
            if not future.done():
                future.set_exception(e)

        return future

    return wrapper
