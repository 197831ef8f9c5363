"""Result collectors for sequential and concurrent walks.

Collectors decide what a walk produces. The walker hands every settled
element to ``collect`` and stops as soon as it returns True; once the walk
is over ``get_result`` provides the operation's result. A collector never
exposes its partial state when a walk fails, because ``get_result`` is only
called on success.
"""

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any, Optional

from .adapter import TraversalPlan


class _NotFound:
    """Type of the NOT_FOUND sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'NOT_FOUND'

    def __reduce__(self):
        return (_NotFound, ())


#: Returned by find() and index_of() when no element satisfies the callback
NOT_FOUND = _NotFound()


def store(target: Any, key: Any, value: Any) -> None:
    """Write a value into a result container.

    Lists are filled in walk order, mappings and plain objects by key.
    """
    if isinstance(target, list):
        target.append(value)
    elif isinstance(target, MutableMapping):
        target[key] = value
    else:
        setattr(target, key, value)


class IterationCollector(ABC):
    """Abstract base class for walk collectors.

    Collectors process settled elements during a walk to build the
    operation's result. They can maintain state between elements.
    """

    def __init__(self, plan: TraversalPlan):
        """Initialize collector for a traversal plan.

        Args:
            plan: Plan of the walk this collector serves
        """
        self.plan = plan
        self.reset()

    @abstractmethod
    def reset(self):
        """Reset collector state.

        Called on construction.
        """
        pass

    @abstractmethod
    def collect(self, key: Any, raw: Any, value: Any, result: Any) -> bool:
        """Collect one settled element.

        Args:
            key: Key or position of the element
            raw: Element as stored in the container
            value: Element after resolving a pending value
            result: Settled result of the callback

        Returns:
            True to stop the walk early
        """
        pass

    @abstractmethod
    def get_result(self) -> Any:
        """Get final collected result.

        Returns:
            The operation's result
        """
        pass


class EachCollector(IterationCollector):
    """Records nothing; optionally stops on a truthy or falsy result.

    With ``stop_on_return`` unset the result is the source container.
    Otherwise the walk stops the first time ``bool(result)`` equals the
    flag, resolving with the flag, and resolves with its negation when
    the walk is exhausted.
    """

    def __init__(self, plan: TraversalPlan, stop_on_return: Optional[bool] = None):
        self.stop_on_return = stop_on_return
        super().__init__(plan)

    def reset(self):
        self.stopped = False

    def collect(self, key: Any, raw: Any, value: Any, result: Any) -> bool:
        if self.stop_on_return is not None and bool(result) is self.stop_on_return:
            self.stopped = True
        return self.stopped

    def get_result(self) -> Any:
        if self.stop_on_return is None:
            return self.plan.container
        return self.stop_on_return if self.stopped else not self.stop_on_return


class FilterCollector(IterationCollector):
    """Keeps every raw element whose callback result is truthy."""

    def reset(self):
        self.target = self.plan.take_collector()

    def collect(self, key: Any, raw: Any, value: Any, result: Any) -> bool:
        if result:
            store(self.target, key, raw)
        return False

    def get_result(self) -> Any:
        return self.target


class MapCollector(IterationCollector):
    """Stores every callback result at its element's key or position."""

    def reset(self):
        self.target = self.plan.take_collector()

    def collect(self, key: Any, raw: Any, value: Any, result: Any) -> bool:
        store(self.target, key, result)
        return False

    def get_result(self) -> Any:
        return self.target


class SearchCollector(IterationCollector):
    """Stops on the first truthy callback result.

    Provides either the matching element's key (``want_key=True``) or its
    resolved value, or NOT_FOUND when nothing matched.
    """

    def __init__(self, plan: TraversalPlan, want_key: bool = True):
        self.want_key = want_key
        super().__init__(plan)

    def reset(self):
        self.found_key = NOT_FOUND
        self.found_value = NOT_FOUND

    def collect(self, key: Any, raw: Any, value: Any, result: Any) -> bool:
        if result:
            self.found_key = key
            self.found_value = value
            return True
        return False

    def get_result(self) -> Any:
        return self.found_key if self.want_key else self.found_value
