"""Paced consumption of push-style data sources.

Sources push units through events and can be paused; ``process`` drains
one while keeping at most one unit of asynchronous work outstanding.
"""

from .source import PushSource, IterableSource
from .processor import (
    ProcessContext,
    PacedStreamConsumer,
    default_processor,
    process,
)

__all__ = [
    # Sources
    'PushSource',
    'IterableSource',
    # Consumer
    'ProcessContext',
    'PacedStreamConsumer',
    'default_processor',
    'process',
]
