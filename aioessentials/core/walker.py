"""Sequential walker.

The one engine behind each/some/every/filter/map/find/index_of. It walks a
traversal plan strictly one element at a time: element i+1 is never read
before element i's pending value and callback result have settled.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from ..errors import CallbackFailure, ElementResolutionFailure
from .adapter import TraversalPlan
from .collector import IterationCollector

logger = logging.getLogger(__name__)

IterationCallback = Callable[[Any, Any, Any], Union[Any, Awaitable[Any]]]


async def resolve_element(raw: Any, key: Any) -> Any:
    """Resolve an element that may itself be a pending computation.

    Args:
        raw: Element as stored in the container
        key: Key or position of the element (for error reporting)

    Returns:
        The resolved value, or the raw element if it wasn't pending

    Raises:
        ElementResolutionFailure: If the pending element failed
    """
    if not inspect.isawaitable(raw):
        return raw

    try:
        return await raw
    except Exception as e:
        raise ElementResolutionFailure(e, key) from e


async def invoke_callback(callback: IterationCallback, value: Any, key: Any, container: Any) -> Any:
    """Invoke a user callback and wait for its result to settle.

    Args:
        callback: Plain or async callable taking (value, key, container)
        value: Resolved element value
        key: Key or position of the element
        container: Source container

    Returns:
        The settled callback result

    Raises:
        CallbackFailure: If the callback raised or its awaitable failed
    """
    try:
        result = callback(value, key, container)
    except Exception as e:
        raise CallbackFailure(e, key) from e

    if inspect.isawaitable(result):
        try:
            result = await result
        except Exception as e:
            raise CallbackFailure(e, key) from e

    return result


class SequentialWalker:
    """Walks a traversal plan one element at a time.

    Forward walkers go from position 0 to count-1, reverse walkers the
    other way round with identical per-element semantics. The walk is an
    explicit loop and yields one scheduling turn between elements, so
    stack depth stays flat however large the container is.
    """

    def __init__(self, reverse: bool = False):
        """Initialize walker.

        Args:
            reverse: If True, walk from the last element to the first
        """
        self.reverse = reverse

    async def walk(
        self,
        plan: TraversalPlan,
        callback: IterationCallback,
        collector: IterationCollector
    ) -> Any:
        """Walk all elements of a plan, feeding the collector.

        Any failure aborts the walk immediately; no further element is
        read and the collector's partial state is dropped.

        Args:
            plan: Traversal plan to execute
            callback: Callback invoked per element
            collector: Collector building the result

        Returns:
            The collector's result
        """
        logger.debug(
            "Walking %d element(s) of %s %s",
            plan.count, plan.shape.value, "backward" if self.reverse else "forward",
        )

        for position in plan.positions(self.reverse):
            key = plan.key_at(position)
            raw = plan.read(key)

            try:
                value = await resolve_element(raw, key)
                result = await invoke_callback(callback, value, key, plan.container)
            except (ElementResolutionFailure, CallbackFailure) as e:
                logger.debug("Walk aborted at %r: %s", key, e)
                raise

            if collector.collect(key, raw, value, result):
                logger.debug("Walk stopped early at %r", key)
                break

            # Yield to the loop before advancing
            await asyncio.sleep(0)

        return collector.get_result()
