"""Container adapter abstraction.

Defines how the different container shapes are adapted into one uniform
traversal interface. Each adapter knows how to list the keys of a
container, read a single element and build an empty result collector of
the same family. ``prepare_iteration`` picks the adapter once per call and
freezes everything into a ``TraversalPlan``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Iterator, List, Optional, Set, Tuple, Type

from ..config import AccessMode, ContainerShape, IterationConfig
from ..errors import UnsupportedContainerKind

logger = logging.getLogger(__name__)


class ContainerAdapter(ABC):
    """Abstract base class for container adapters.

    Adapters bridge between the generic walking logic and a specific
    container shape. They are stateless; a single instance of every
    adapter is shared by all traversals.
    """

    shape: ContainerShape
    access_mode: AccessMode

    def __init__(self):
        self._capabilities = self._define_capabilities()

    @classmethod
    @abstractmethod
    def accepts(cls, container: Any) -> bool:
        """Check if this adapter can traverse the container.

        Args:
            container: Value to classify

        Returns:
            True if the container has this adapter's shape
        """
        pass

    @abstractmethod
    def list_keys(self, container: Any) -> Tuple[Optional[List[Any]], int]:
        """Enumerate the container's keys in traversal order.

        Args:
            container: Container to enumerate

        Returns:
            Tuple of (keys, count). Keys are None when elements are
            addressed by their integer position.
        """
        pass

    @abstractmethod
    def get(self, container: Any, key: Any) -> Any:
        """Read the raw element stored at key.

        Args:
            container: Container to read from
            key: Key or position of the element

        Returns:
            The raw element, possibly a pending awaitable
        """
        pass

    @abstractmethod
    def create_collector(self, container: Any) -> Any:
        """Create an empty result container of the same family.

        Args:
            container: Source container

        Returns:
            New empty container
        """
        pass

    def supports_capability(self, capability: str) -> bool:
        """Check if adapter supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define adapter capabilities.

        Override in subclasses to declare supported features.

        Returns:
            Set of capability names
        """
        return {
            'list_keys',
            'get',
            'same_family_collector',
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape.value})"


class OrderedMapAdapter(ContainerAdapter):
    """Adapter for ordered key/value containers (any ``Mapping``).

    Keys are taken in the mapping's own iteration order and elements are
    read with explicit get-by-key access.
    """

    shape = ContainerShape.ORDERED_MAP
    access_mode = AccessMode.GET_BY_KEY

    @classmethod
    def accepts(cls, container: Any) -> bool:
        return isinstance(container, Mapping)

    def list_keys(self, container: Mapping) -> Tuple[List[Any], int]:
        keys = list(container.keys())
        return keys, len(keys)

    def get(self, container: Mapping, key: Any) -> Any:
        return container[key]

    def create_collector(self, container: Mapping) -> MutableMapping:
        # Keep the caller's mapping type where it can be built empty
        container_type = type(container)
        if issubclass(container_type, MutableMapping):
            try:
                return container_type()
            except TypeError:
                pass
        return {}


class SequenceAdapter(ContainerAdapter):
    """Adapter for linear sequences (lists, tuples, strings, ranges...).

    Elements are addressed by integer position, so no key list is built.
    """

    shape = ContainerShape.SEQUENCE
    access_mode = AccessMode.INDEXED

    @classmethod
    def accepts(cls, container: Any) -> bool:
        return isinstance(container, Sequence)

    def list_keys(self, container: Any) -> Tuple[None, int]:
        return None, len(container)

    def get(self, container: Any, key: int) -> Any:
        return container[key]

    def create_collector(self, container: Any) -> list:
        return []


class ArrayLikeAdapter(SequenceAdapter):
    """Adapter for array-likes exposing only ``len()`` and indexed access.

    Traversed exactly like a sequence but never used as an output family:
    collectors are always plain lists.
    """

    shape = ContainerShape.ARRAY_LIKE

    @classmethod
    def accepts(cls, container: Any) -> bool:
        container_type = type(container)
        if not (hasattr(container_type, '__len__') and hasattr(container_type, '__getitem__')):
            return False

        try:
            length = len(container)
        except TypeError:
            return False

        return isinstance(length, int) and length >= 0

    def _define_capabilities(self) -> Set[str]:
        return {'list_keys', 'get'}


class MappingAdapter(ContainerAdapter):
    """Adapter for plain objects treated as key/value mappings.

    The instance attributes (in insertion order) are the keys and
    elements are read by name.
    """

    shape = ContainerShape.MAPPING
    access_mode = AccessMode.NAMED

    @classmethod
    def accepts(cls, container: Any) -> bool:
        return hasattr(container, '__dict__') and not callable(container)

    def list_keys(self, container: Any) -> Tuple[List[str], int]:
        keys = list(vars(container))
        return keys, len(keys)

    def get(self, container: Any, key: str) -> Any:
        return getattr(container, key)

    def create_collector(self, container: Any) -> SimpleNamespace:
        return SimpleNamespace()


# Evaluated in order, first match wins
ADAPTER_TYPES: Tuple[Type[ContainerAdapter], ...] = (
    OrderedMapAdapter,
    SequenceAdapter,
    ArrayLikeAdapter,
    MappingAdapter,
)

_ADAPTERS = tuple(adapter_type() for adapter_type in ADAPTER_TYPES)


def adapter_for(container: Any) -> ContainerAdapter:
    """Classify a container and return the adapter for its shape.

    Args:
        container: Value to classify

    Returns:
        Shared adapter instance

    Raises:
        UnsupportedContainerKind: If no adapter accepts the value
    """
    for adapter in _ADAPTERS:
        if adapter.accepts(container):
            return adapter
    raise UnsupportedContainerKind(container)


@dataclass
class TraversalPlan:
    """Precomputed key order, count and access mode of one traversal.

    The plan is built once per operation call and never refreshed, so
    concurrent mutation of the source container is not tracked.
    """

    container: Any
    adapter: ContainerAdapter
    keys: Optional[List[Any]]
    count: int
    as_array: bool = True
    collector: Any = field(default=None, repr=False)

    @property
    def shape(self) -> ContainerShape:
        return self.adapter.shape

    @property
    def access_mode(self) -> AccessMode:
        return self.adapter.access_mode

    def key_at(self, position: int) -> Any:
        """Translate a traversal position into the element's key."""
        return position if self.keys is None else self.keys[position]

    def positions(self, reverse: bool = False) -> Iterator[int]:
        """Iterate traversal positions forward or backward."""
        if reverse:
            return iter(range(self.count - 1, -1, -1))
        return iter(range(self.count))

    def read(self, key: Any) -> Any:
        """Read the raw element at key from the source container."""
        return self.adapter.get(self.container, key)

    def new_collector(self) -> Any:
        """Build a fresh, empty result container for this plan.

        A list is built when ``as_array`` is set or when the source's
        family cannot serve as output.
        """
        if self.as_array or not self.adapter.supports_capability('same_family_collector'):
            return []
        return self.adapter.create_collector(self.container)

    def take_collector(self) -> Any:
        """Hand out the prepared collector exactly once.

        Later calls build a new one, so a collector is never shared
        between two walks.
        """
        collector = self.collector
        self.collector = None
        return collector if collector is not None else self.new_collector()


def prepare_iteration(container: Any, config: Optional[IterationConfig] = None) -> TraversalPlan:
    """Prepare the traversal plan for iterating over a container.

    Args:
        container: Container to be iterated
        config: Operation configuration; only ``create_collector`` and
            ``as_array`` are relevant here

    Returns:
        TraversalPlan for the container

    Raises:
        UnsupportedContainerKind: If the container has no supported shape
    """
    config = config or IterationConfig()

    adapter = adapter_for(container)
    keys, count = adapter.list_keys(container)

    plan = TraversalPlan(
        container=container,
        adapter=adapter,
        keys=keys,
        count=count,
        as_array=config.as_array,
    )

    if config.create_collector:
        plan.collector = plan.new_collector()

    logger.debug("Prepared %s plan over %d element(s)", plan.shape.value, count)
    return plan
