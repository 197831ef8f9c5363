"""aioessentials - awaitable-aware collection iteration for asyncio.

aioessentials walks lists, tuples, array-likes, mappings and plain objects
with one uniform engine, resolving elements that are awaitables before
handing them to a callback that may itself be a coroutine function.

Sequential operations:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    each, some, every, filter, map, find, index_of
Concurrent operations:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    multi_map
Streams and helpers:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    process, delay, promisify

Example:
    >>> from aioessentials import map
    >>> await map(["a", "b"], lambda value, index, items: value * index)
    ['', 'b']
"""

__version__ = "0.4.0"

from .api import (
    each,
    some,
    every,
    filter,
    map,
    multi_map,
    find,
    index_of,
)
from .core import NOT_FOUND, TraversalPlan, prepare_iteration
from .config import (
    IterationConfig,
    ContainerShape,
    AccessMode,
    ProcessState,
)
from .errors import (
    EssentialsError,
    UnsupportedContainerKind,
    ElementResolutionFailure,
    CallbackFailure,
    SourceFailure,
    AdaptedCallFailure,
)
from .promises import delay, promisify
from .streams import PushSource, IterableSource, ProcessContext, process

__all__ = [
    "__version__",
    # Iteration
    "each",
    "some",
    "every",
    "filter",
    "map",
    "multi_map",
    "find",
    "index_of",
    "NOT_FOUND",
    "TraversalPlan",
    "prepare_iteration",
    # Configuration
    "IterationConfig",
    "ContainerShape",
    "AccessMode",
    "ProcessState",
    # Errors
    "EssentialsError",
    "UnsupportedContainerKind",
    "ElementResolutionFailure",
    "CallbackFailure",
    "SourceFailure",
    "AdaptedCallFailure",
    # Streams and helpers
    "PushSource",
    "IterableSource",
    "ProcessContext",
    "process",
    "delay",
    "promisify",
]
