"""Tests for the attribution cache."""

import threading

import pytest

from masking_resolver.cache import AttributionCache
from masking_resolver.cache import LruEviction
from masking_resolver.cache import NoEviction
from masking_resolver.library import VOID
from masking_resolver.library import LibraryDef


class CountingIdentifier:
    def __init__(self, results=None):
        self.calls: list[str] = []
        self.results = results or {}
        self._lock = threading.Lock()

    def __call__(self, key: str) -> LibraryDef:
        with self._lock:
            self.calls.append(key)
        return self.results.get(key, VOID)


def test_computes_once_per_key():
    identify = CountingIdentifier({"a.jar": LibraryDef("g", "a")})
    cache = AttributionCache(identify)

    assert cache.get_or_compute("a.jar") == LibraryDef("g", "a")
    assert cache.get_or_compute("a.jar") == LibraryDef("g", "a")
    assert identify.calls == ["a.jar"]


def test_void_is_cached():
    identify = CountingIdentifier()
    cache = AttributionCache(identify)

    assert cache.get_or_compute("plain.jar") is VOID
    assert cache.get_or_compute("plain.jar") is VOID
    assert identify.calls == ["plain.jar"]
    assert "plain.jar" in cache


def test_clear_causes_recompute_with_same_result():
    identify = CountingIdentifier({"a.jar": LibraryDef("g", "a")})
    cache = AttributionCache(identify)

    first = cache.get_or_compute("a.jar")
    cache.clear()
    assert len(cache) == 0
    assert cache.get_or_compute("a.jar") == first
    assert identify.calls == ["a.jar", "a.jar"]


def test_evict_single_key():
    cache = AttributionCache(CountingIdentifier())
    cache.get_or_compute("a.jar")
    assert cache.evict("a.jar") is True
    assert cache.evict("a.jar") is False
    assert "a.jar" not in cache


def test_lru_bounds_entries():
    identify = CountingIdentifier()
    cache = AttributionCache(identify, LruEviction(max_entries=2))

    cache.get_or_compute("a.jar")
    cache.get_or_compute("b.jar")
    cache.get_or_compute("a.jar")  # a is now most recent
    cache.get_or_compute("c.jar")

    assert len(cache) == 2
    assert "a.jar" in cache
    assert "b.jar" not in cache

    cache.get_or_compute("b.jar")
    assert identify.calls == ["a.jar", "b.jar", "c.jar", "b.jar"]


def test_lru_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        LruEviction(0)


def test_no_eviction_keeps_everything():
    cache = AttributionCache(CountingIdentifier(), NoEviction())
    for i in range(50):
        cache.get_or_compute(f"{i}.jar")
    assert len(cache) == 50


def test_concurrent_lookups_agree():
    identify = CountingIdentifier({f"{i}.jar": LibraryDef("g", f"a{i}") for i in range(20)})
    cache = AttributionCache(identify, LruEviction(max_entries=5))
    errors: list[str] = []

    def worker():
        for _ in range(50):
            for i in range(20):
                if cache.get_or_compute(f"{i}.jar").artifact_id != f"a{i}":
                    errors.append(f"{i}.jar")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(cache) <= 5
