"""High-level API for aioessentials.

This module provides the iteration operations. Each one is a plain
function: it validates its options and prepares the traversal plan right
away (so an unsupported container is rejected before any callback runs)
and returns the awaitable that performs the traversal.

Callbacks are invoked as ``callback(value, key, container)`` and may be
plain functions or coroutine functions. Elements of the container that are
awaitables are resolved before being handed to the callback.
"""

from typing import Any, Awaitable, Optional

from .config import IterationConfig
from .core import (
    ConcurrentMapper,
    EachCollector,
    FilterCollector,
    MapCollector,
    SearchCollector,
    SequentialWalker,
    prepare_iteration,
)
from .core.walker import IterationCallback

_forward = SequentialWalker()
_backward = SequentialWalker(reverse=True)
_concurrent = ConcurrentMapper()


def each(
    container: Any,
    callback: IterationCallback,
    *,
    stop_on_return: Optional[bool] = None
) -> Awaitable[Any]:
    """Invoke callback on every element, one after another.

    The callback of the next element is not invoked before the previous
    callback's result has settled.

    Args:
        container: Collection of elements to traverse
        callback: Invoked per element
        stop_on_return: True/False to stop on the first truthy/falsy
            callback result

    Returns:
        Awaitable for the container itself, or, with ``stop_on_return``
        set, for ``stop_on_return`` if the walk stopped early and its
        negation otherwise
    """
    config = IterationConfig.for_each(stop_on_return).ensure_valid()
    plan = prepare_iteration(container, config)
    return _forward.walk(plan, callback, EachCollector(plan, config.stop_on_return))


def some(container: Any, callback: IterationCallback) -> Awaitable[bool]:
    """Test if at least one element satisfies the callback.

    Stops at the first truthy callback result.

    Returns:
        Awaitable for True if any callback result was truthy
    """
    return each(container, callback, stop_on_return=True)


def every(container: Any, callback: IterationCallback) -> Awaitable[bool]:
    """Test if every element satisfies the callback.

    Stops at the first falsy callback result.

    Returns:
        Awaitable for True if all callback results were truthy
    """
    return each(container, callback, stop_on_return=False)


def filter(
    container: Any,
    callback: IterationCallback,
    *,
    as_array: bool = True
) -> Awaitable[Any]:
    """Keep the elements for which the callback returns a truthy result.

    Kept elements are the raw elements of the container, in source order.

    Args:
        container: Collection of elements to filter
        callback: Invoked per element, decides whether to keep it
        as_array: False to get a result of the source's family (mapping
            for a mapping, namespace for a plain object)

    Returns:
        Awaitable for the filtered collection
    """
    config = IterationConfig.for_collect(as_array).ensure_valid()
    plan = prepare_iteration(container, config)
    return _forward.walk(plan, callback, FilterCollector(plan))


def map(
    container: Any,
    callback: IterationCallback,
    *,
    as_array: bool = True
) -> Awaitable[Any]:
    """Replace every element by its callback result, one after another.

    Args:
        container: Collection of elements to map
        callback: Invoked per element, provides the mapped value
        as_array: False to get a result of the source's family

    Returns:
        Awaitable for the mapped collection
    """
    config = IterationConfig.for_collect(as_array).ensure_valid()
    plan = prepare_iteration(container, config)
    return _forward.walk(plan, callback, MapCollector(plan))


def multi_map(
    container: Any,
    callback: IterationCallback,
    *,
    as_array: bool = True
) -> Awaitable[Any]:
    """Replace every element by its callback result, all at once.

    In opposition to map() every element is processed concurrently, with
    no limit. Prefer it for smaller collections.

    Args:
        container: Collection of elements to map
        callback: Invoked per element, provides the mapped value
        as_array: False to get a result of the source's family

    Returns:
        Awaitable for the mapped collection, in source order
    """
    config = IterationConfig.for_collect(as_array).ensure_valid()
    plan = prepare_iteration(container, config)
    return _concurrent.map(plan, callback, MapCollector(plan))


def index_of(
    container: Any,
    callback: IterationCallback,
    *,
    get_last: bool = False
) -> Awaitable[Any]:
    """Find the key of the first element satisfying the callback.

    Args:
        container: Collection of elements to search
        callback: Invoked per element, tests if it's the searched one
        get_last: True to search from the end, finding the last match

    Returns:
        Awaitable for the matching key or position, or NOT_FOUND
    """
    config = IterationConfig.for_search(get_last).ensure_valid()
    plan = prepare_iteration(container, config)
    walker = _backward if config.get_last else _forward
    return walker.walk(plan, callback, SearchCollector(plan, want_key=True))


def find(
    container: Any,
    callback: IterationCallback,
    *,
    get_last: bool = False
) -> Awaitable[Any]:
    """Find the first element satisfying the callback.

    Args:
        container: Collection of elements to search
        callback: Invoked per element, tests if it's the searched one
        get_last: True to search from the end, finding the last match

    Returns:
        Awaitable for the matching element's resolved value, or NOT_FOUND
    """
    config = IterationConfig.for_search(get_last).ensure_valid()
    plan = prepare_iteration(container, config)
    walker = _backward if config.get_last else _forward
    return walker.walk(plan, callback, SearchCollector(plan, want_key=False))
