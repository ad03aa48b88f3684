"""Caching implementations for the completion engine.

Field value pages are kept in a bounded LRU cache so that repeated
searches for the same field and prefix never hit the network twice.
"""

from djangoql_completion.core.cache.base import Cache
from djangoql_completion.core.cache.lru import LRUCache

__all__ = [
    "Cache",
    "LRUCache",
]
