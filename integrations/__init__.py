"""
External integrations.
"""

from integrations.sheet_relays import FeedRetriever, RelayStrategy, STRATEGIES

__all__ = [
    "FeedRetriever",
    "RelayStrategy",
    "STRATEGIES",
]
