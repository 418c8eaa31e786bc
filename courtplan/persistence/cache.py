"""Bounded, time-expiring in-memory cache.

Owned by the caller and injected where needed; nothing in courtplan keeps
a module-level cache.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from courtplan.config.settings import Settings

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Thread-safe mapping whose entries expire after ttl_seconds.

    When full, the least recently written entry is evicted.

    Args:
        max_entries: Upper bound on stored entries
        ttl_seconds: Lifetime of each entry
        clock: Monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TTLCache":
        return cls(max_entries=settings.plan_cache_max_entries, ttl_seconds=settings.plan_cache_ttl_seconds)

    def get(self, key: Hashable) -> V | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if now - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: V) -> None:
        now = self._clock()
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (now, value)
            self._purge_expired(now)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def _purge_expired(self, now: float) -> None:
        # Entries are in write order, so expired ones sit at the front
        while self._entries:
            key, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at < self.ttl_seconds:
                break
            del self._entries[key]
