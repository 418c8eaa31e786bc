"""Tests for the injected TTL cache."""

import threading

import pytest

from courtplan.config.settings import Settings
from courtplan.persistence.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = TTLCache(max_entries=4, ttl_seconds=10, clock=clock)
    cache.set("a1", "plan")

    clock.now = 9.9
    assert cache.get("a1") == "plan"

    clock.now = 10.0
    assert cache.get("a1") is None
    assert len(cache) == 0


def test_size_is_bounded() -> None:
    clock = FakeClock()
    cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)

    cache.set("a1", 1)
    cache.set("a2", 2)
    cache.set("a3", 3)

    assert len(cache) == 2
    assert "a1" not in cache
    assert cache.get("a3") == 3


def test_rewrite_refreshes_entry() -> None:
    clock = FakeClock()
    cache = TTLCache(max_entries=2, ttl_seconds=10, clock=clock)
    cache.set("a1", 1)
    cache.set("a2", 2)

    clock.now = 5
    cache.set("a1", 10)
    cache.set("a3", 3)

    assert cache.get("a1") == 10
    assert cache.get("a2") is None

    clock.now = 12
    assert cache.get("a1") == 10


def test_invalidate_and_clear() -> None:
    cache = TTLCache()
    cache.set("a1", 1)
    cache.set("a2", 2)

    cache.invalidate("a1")
    assert cache.get("a1") is None
    cache.clear()
    assert len(cache) == 0


def test_rejects_bad_bounds() -> None:
    with pytest.raises(ValueError, match="max_entries"):
        TTLCache(max_entries=0)
    with pytest.raises(ValueError, match="ttl_seconds"):
        TTLCache(ttl_seconds=0)


def test_from_settings() -> None:
    cache = TTLCache.from_settings(Settings(plan_cache_ttl_seconds=5, plan_cache_max_entries=3))

    assert cache.ttl_seconds == 5
    assert cache.max_entries == 3


def test_concurrent_writers_respect_bound() -> None:
    cache = TTLCache(max_entries=50, ttl_seconds=60)

    def write(offset: int) -> None:
        for i in range(200):
            cache.set(f"{offset}-{i}", i)

    threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 50
