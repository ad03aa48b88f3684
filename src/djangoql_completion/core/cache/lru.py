"""LRU (least recently used) cache implementation.

This module provides a bounded in-memory cache that evicts the least
recently used entry once its capacity is exceeded.
"""

from collections import OrderedDict
from typing import TypeVar

from djangoql_completion.core.cache.base import Cache

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Cache[K, V]):
    """Bounded cache with least-recently-used eviction.

    Both ``get`` and ``set`` mark a key as most recently used.

    Example:
        >>> cache = LRUCache[str, int](capacity=2)
        >>> cache.set("a", 1)
        >>> cache.set("b", 2)
        >>> cache.get("a")
        1
        >>> cache.set("c", 3)  # evicts "b"
        >>> "b" in cache
        False
    """

    def __init__(self, capacity: int = 100) -> None:
        """Initialize an empty LRU cache.

        Args:
            capacity: Maximum number of entries. Must be a positive integer.
        """
        if capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self.capacity = capacity
        self._data: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> V | None:
        """Get a value and mark it as most recently used.

        Args:
            key: The cache key

        Returns:
            The cached value if found, None otherwise
        """
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key: K, value: V) -> None:
        """Store a value, evicting the least recently used entry when full.

        Args:
            key: The cache key
            value: The value to cache
        """
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.capacity:
            self._data.popitem(last=False)

    def clear(self, key: K | None = None) -> None:
        """Clear cache entries.

        Args:
            key: If provided, clear only this key. If None, clear all entries.
        """
        if key is None:
            self._data.clear()
        else:
            self._data.pop(key, None)

    def keys(self) -> list[K]:
        """Return keys ordered from least to most recently used."""
        return list(self._data.keys())

    def __len__(self) -> int:
        """Return the number of cached entries."""
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        """Check if a key exists in the cache without touching its recency."""
        return key in self._data
