import pytest

from svg_ns_normalizer.normalize.cache import LruCache


def test_lru_evicts_least_recently_used() -> None:
    cache: LruCache[str, str] = LruCache(2)
    cache.put("a", "1")
    cache.put("b", "2")
    assert cache.get("a") == "1"
    cache.put("c", "3")
    assert cache.get("b") is None
    assert cache.get("a") == "1"
    assert cache.get("c") == "3"
    assert len(cache) == 2


def test_lru_clear_and_invalid_size() -> None:
    cache: LruCache[str, str] = LruCache(1)
    cache.put("a", "1")
    cache.clear()
    assert cache.get("a") is None
    with pytest.raises(ValueError):
        LruCache(0)
