"""Core protocols for type hints and abstractions.

Protocols describe the contracts collaborators must satisfy, so the engine
can be driven by real HTTP clients in production and by small stubs in
tests without depending on concrete classes.
"""

from typing import Any, Mapping, Protocol, TypeVar

__all__ = [
    "Cache",
    "JsonClient",
    "K",
    "V",
]

# Invariant (default) is correct for Cache since we both read and write
K = TypeVar("K", contravariant=False)
V = TypeVar("V", contravariant=False)


class Cache(Protocol[K, V]):
    """Protocol for caching implementations.

    Type Parameters:
        K: The key type
        V: The value type
    """

    def get(self, key: K) -> V | None:
        """Get a value from the cache.

        Args:
            key: The cache key

        Returns:
            The cached value if found, None otherwise
        """
        ...

    def set(self, key: K, value: V) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key
            value: The value to cache
        """
        ...

    def clear(self, key: K | None = None) -> None:
        """Clear cache entries.

        Args:
            key: If provided, clear only this key. If None, clear all entries.
        """
        ...

    def __len__(self) -> int: ...

    def __contains__(self, key: object) -> bool: ...


class JsonClient(Protocol):
    """Protocol for fetching JSON documents over the network."""

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            url: Target URL
            params: Optional query parameters merged into the URL

        Raises:
            FetchError: On transport failure, non-200 status or invalid JSON
        """
        ...
