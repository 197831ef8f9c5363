"""Core abstractions for awaitable-aware collection iteration.

This module defines the iteration engine: container adapters building a
traversal plan, collectors deciding what a walk produces, and the two
executors (sequential walker and concurrent mapper).
"""

from .adapter import (
    ContainerAdapter,
    OrderedMapAdapter,
    SequenceAdapter,
    ArrayLikeAdapter,
    MappingAdapter,
    TraversalPlan,
    adapter_for,
    prepare_iteration,
)
from .collector import (
    NOT_FOUND,
    IterationCollector,
    EachCollector,
    FilterCollector,
    MapCollector,
    SearchCollector,
)
from .walker import SequentialWalker, resolve_element, invoke_callback
from .concurrent import ConcurrentMapper

__all__ = [
    # Adapters
    'ContainerAdapter',
    'OrderedMapAdapter',
    'SequenceAdapter',
    'ArrayLikeAdapter',
    'MappingAdapter',
    'TraversalPlan',
    'adapter_for',
    'prepare_iteration',
    # Collectors
    'NOT_FOUND',
    'IterationCollector',
    'EachCollector',
    'FilterCollector',
    'MapCollector',
    'SearchCollector',
    # Executors
    'SequentialWalker',
    'ConcurrentMapper',
    'resolve_element',
    'invoke_callback',
]
