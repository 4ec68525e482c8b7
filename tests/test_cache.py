from stitchify.config import SETTINGS
from stitchify.infrastructure.cache import ResponseCache


def test_response_cache_eviction_limit():
    cache = ResponseCache()

    # Fill the cache beyond the limit to trigger eviction logic.
    for idx in range(20):
        cache.put(f"key-{idx}", b"data")

    assert len(cache) == 16

    # Ensure the oldest entries are evicted first
    assert "key-0" not in cache._entries
    assert "key-3" not in cache._entries
    assert "key-4" in cache._entries


def test_response_cache_overwrite_does_not_evict():
    cache = ResponseCache(max_entries=2)
    cache.put("a", b"1")
    cache.put("b", b"2")

    cache.put("a", b"3")

    assert cache.get("a") == b"3"
    assert cache.get("b") == b"2"


def test_response_cache_expires_entries(monkeypatch):
    cache = ResponseCache()
    cache.put("key", b"png")
    monkeypatch.setattr(SETTINGS, "cache_ttl", -1.0)

    assert cache.get("key") is None
    assert len(cache) == 0
