"""Testing utilities for aioessentials consumers.

This module provides fixtures that give test suites visibility into the
ordering and overlap of callback invocations without relying on internals.
"""

from .fixtures import (
    RecordingCallback,
    ManualSource,
    pending_value,
    failing_value,
    items_failing_at,
)

__all__ = [
    'RecordingCallback',
    'ManualSource',
    'pending_value',
    'failing_value',
    'items_failing_at',
]
