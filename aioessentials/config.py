"""Configuration system for aioessentials.

This module defines how callers specify what an iteration operation should
do: whether it may stop early, what kind of result collection it builds and
in which direction it walks. It also names the container shapes and element
access modes the container adapters classify inputs into.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, List


class ContainerShape(Enum):
    """Traversal-relevant classification of a container.

    Adapters classify every input into exactly one of these shapes.
    """
    ORDERED_MAP = "ordered_map"    # Mapping with explicit get/keys/len
    SEQUENCE = "sequence"          # Any collections.abc.Sequence
    ARRAY_LIKE = "array_like"      # Anything else with len() and indexing
    MAPPING = "mapping"            # Plain object, attributes as keys


class AccessMode(Enum):
    """How elements are read from a container while walking it."""
    INDEXED = "indexed"            # container[position]
    NAMED = "named"                # getattr(container, key)
    GET_BY_KEY = "get_by_key"      # container[key] on a mapping


class ProcessState(Enum):
    """States of the paced stream consumer.

    Idle -> Draining -> {Draining, AwaitingCallback} -> ... -> Finished | Failed
    """
    IDLE = "idle"
    DRAINING = "draining"
    AWAITING_CALLBACK = "awaiting_callback"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessState.FINISHED, ProcessState.FAILED)


@dataclass
class IterationConfig:
    """Complete configuration for a single iteration operation.

    One instance is built per call of an operation and validated before
    the traversal plan is prepared.
    """

    # Early stop for each(): True stops on first truthy callback result,
    # False on first falsy one, None never stops early
    stop_on_return: Optional[bool] = None

    # Result family for filter/map/multi_map
    as_array: bool = True

    # Walk backwards for find/index_of
    get_last: bool = False

    # Whether the plan needs an empty result collector
    create_collector: bool = False

    # Convenience constructors for the operation families

    @classmethod
    def for_each(cls, stop_on_return: Optional[bool] = None) -> 'IterationConfig':
        """Create config for plain sequential traversal.

        Args:
            stop_on_return: Early-stop flag (see class docs)

        Returns:
            IterationConfig without a collector
        """
        return cls(stop_on_return=stop_on_return)

    @classmethod
    def for_collect(cls, as_array: bool = True) -> 'IterationConfig':
        """Create config for operations building a result collection.

        Args:
            as_array: True to always collect into a list

        Returns:
            IterationConfig requesting a collector
        """
        return cls(as_array=as_array, create_collector=True)

    @classmethod
    def for_search(cls, get_last: bool = False) -> 'IterationConfig':
        """Create config for searching operations.

        Args:
            get_last: True to search from the end

        Returns:
            IterationConfig for find/index_of
        """
        return cls(get_last=get_last)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.stop_on_return is not None and not isinstance(self.stop_on_return, bool):
            errors.append("stop_on_return must be True, False or None")

        if not isinstance(self.as_array, bool):
            errors.append("as_array must be a boolean")

        if not isinstance(self.get_last, bool):
            errors.append("get_last must be a boolean")

        if self.stop_on_return is not None and self.create_collector:
            errors.append("stop_on_return cannot be combined with a result collector")

        return errors

    def ensure_valid(self) -> 'IterationConfig':
        """Raise ValueError unless this configuration is valid.

        Returns:
            This configuration for chaining
        """
        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid configuration: {', '.join(errors)}")
        return self
