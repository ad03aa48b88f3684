import pytest

from djangoql_completion.core.cache import Cache, LRUCache


def test_get_and_set() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=3)
    cache.set("a", 1)

    assert cache.get("a") == 1
    assert cache.get("missing") is None
    assert "a" in cache
    assert len(cache) == 1


def test_evicts_least_recently_used() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert "b" not in cache
    assert cache.keys() == ["a", "c"]


def test_set_refreshes_recency() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.get("a") == 10
    assert "b" not in cache


def test_contains_does_not_touch_recency() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    assert "a" in cache
    cache.set("c", 3)

    assert "a" not in cache


def test_clear() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=3)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.clear("a")
    assert cache.keys() == ["b"]

    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize("capacity", [0, -1])
def test_invalid_capacity(capacity: int) -> None:
    with pytest.raises(ValueError):
        LRUCache(capacity=capacity)


def test_satisfies_cache_protocol() -> None:
    cache: Cache[str, int] = LRUCache(capacity=1)
    cache.set("a", 1)
    assert cache.get("a") == 1
