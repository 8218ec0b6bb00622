# src/pawprint/services/__init__.py
"""Business logic services for the Pawprint application."""

from .fanout import FanoutNotifier, get_fanout_notifier
from .feed import FeedAggregator

__all__ = [
    "FanoutNotifier",
    "FeedAggregator",
    "get_fanout_notifier",
]
