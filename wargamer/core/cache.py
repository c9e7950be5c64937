"""wargamer.core.cache

In-memory caches with TTL and accounting.

Expiry is lazy: entries are checked, and evicted, when they are accessed.
Nothing sweeps in the background.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from wargamer.core.time import elapsed_s, utc_now

Clock = Callable[[], datetime]


def _check_ttl(name: str, value: float | None) -> float | None:
    if value is None:
        return None
    value = float(value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0 or None, got {value}")
    return value


@dataclass(slots=True)
class CacheEntry:
    """A single cached value. ``time_to_live=None`` never expires."""

    value: Any
    time_to_live: float | None = None
    created_at: datetime = field(default_factory=utc_now)
    accessed_at: datetime | None = None

    def __post_init__(self) -> None:
        self.time_to_live = _check_ttl("time_to_live", self.time_to_live)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.time_to_live is None:
            return False
        return elapsed_s(self.created_at, now=now) >= self.time_to_live

    def touch(self, now: datetime | None = None) -> None:
        self.accessed_at = now or utc_now()


@dataclass(slots=True)
class CacheMeta:
    """Counters and lifecycle stamps for one cache."""

    created_at: datetime = field(default_factory=utc_now)
    accessed_at: datetime | None = None
    updated_at: datetime | None = None
    cleared_at: datetime | None = None
    hits: int = 0
    misses: int = 0
    expired: int = 0
    evicted: int = 0

    def hit(self, now: datetime) -> CacheMeta:
        self.accessed_at = now
        self.hits += 1
        return self

    def miss(self, now: datetime) -> CacheMeta:
        self.accessed_at = now
        self.misses += 1
        return self

    def expire(self) -> CacheMeta:
        self.expired += 1
        return self

    def evict(self) -> CacheMeta:
        self.evicted += 1
        return self

    def touch_update(self, now: datetime) -> CacheMeta:
        self.updated_at = now
        return self

    def clear(self, now: datetime) -> CacheMeta:
        # created_at is deliberately untouched
        self.updated_at = now
        self.cleared_at = now
        self.hits = 0
        self.misses = 0
        self.expired = 0
        self.evicted = 0
        return self

    def serialize(self) -> dict[str, Any]:
        return {
            "created_at": self.created_at,
            "accessed_at": self.accessed_at,
            "updated_at": self.updated_at,
            "cleared_at": self.cleared_at,
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
            "evicted": self.evicted,
        }


class Cache:
    """Thread-safe keyed store of :class:`CacheEntry` with hit/miss/expiry accounting.

    Args:
        time_to_live: Seconds each entry stays valid. ``None`` means forever.
        max_size: Optional capacity. Inserting a new key into a full cache evicts
            the least recently used entry.
        cache_time_to_live: Optional lifetime of the whole cache, measured from
            creation or the last clear. Once exceeded the cache clears itself
            before the next operation.
        clock: Time source. Tests pass a fake.
    """

    def __init__(
        self,
        time_to_live: float | None = None,
        *,
        max_size: int | None = None,
        cache_time_to_live: float | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if max_size is not None and int(max_size) < 1:
            raise ValueError(f"max_size must be >= 1 or None, got {max_size}")

        self.time_to_live = _check_ttl("time_to_live", time_to_live)
        self.cache_time_to_live = _check_ttl("cache_time_to_live", cache_time_to_live)
        self.max_size = None if max_size is None else int(max_size)
        self._clock = clock
        self._store: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self.meta = CacheMeta(created_at=clock())

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        with self._lock:
            self._expired_check()
            return len(self._store)

    @property
    def empty(self) -> bool:
        with self._lock:
            self._expired_check()
            return len(self._store) == 0

    @property
    def statistics(self) -> dict[str, Any]:
        with self._lock:
            self._expired_check()
            return {**self.meta.serialize(), "size": len(self._store)}

    @property
    def expired(self) -> bool:
        """True once the whole cache has outlived ``cache_time_to_live``."""

        if self.cache_time_to_live is None:
            return False
        since = self.meta.cleared_at or self.meta.created_at
        return elapsed_s(since, now=self._clock()) >= self.cache_time_to_live

    def keys(self) -> list[Hashable]:
        with self._lock:
            self._expired_check()
            return list(self._store.keys())

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        # membership only, counters are untouched
        with self._lock:
            return key in self._store

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the value for ``key`` or ``default``.

        Absence is a normal outcome. A miss is recorded for absent keys and for
        expired ones; the latter also count as an expiry and are evicted.
        """

        with self._lock:
            self._expired_check()
            now = self._clock()

            if self.evict_if_expired(key):
                self.meta.miss(now)
                return default

            entry = self._store.get(key)
            if entry is None:
                self.meta.miss(now)
                return default

            self.meta.hit(now)
            entry.touch(now)
            self._store.move_to_end(key)
            return entry.value

    def peek(self, key: Hashable, default: Any = None) -> Any:
        """Like :meth:`get` but leaves counters, access stamps and the store alone."""

        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return default
            return entry.value

    def evict_if_expired(self, key: Hashable) -> bool:
        """Evict ``key`` if its entry has expired. Returns True when evicted.

        This is the only place a stored entry transitions to evicted-by-expiry.
        """

        with self._lock:
            entry = self._store.get(key)
            if entry is None or not entry.is_expired(self._clock()):
                return False
            del self._store[key]
            self.meta.expire()
            return True

    def set(self, key: Hashable, value: Any) -> Cache:
        with self._lock:
            self._expired_check()
            now = self._clock()

            self._store.pop(key, None)
            if self.max_size is not None:
                while len(self._store) >= self.max_size:
                    self._store.popitem(last=False)
                    self.meta.evict()

            self._store[key] = CacheEntry(value=value, time_to_live=self.time_to_live, created_at=now)
            self.meta.touch_update(now)
            return self

    def delete(self, key: Hashable) -> Cache:
        with self._lock:
            if not self._expired_check() and self._store.pop(key, None) is not None:
                self.meta.touch_update(self._clock())
            return self

    def clear(self) -> Cache:
        with self._lock:
            self._store.clear()
            self.meta.clear(self._clock())
            return self

    def _expired_check(self) -> bool:
        if self.expired:
            self.clear()
            return True
        return False


class CacheManager:
    """Registry of named caches.

    ``create`` always replaces. Callers that want idempotence check ``has`` first.
    """

    def __init__(self, *, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._caches: dict[str, Cache] = {}
        self._lock = threading.RLock()

    def create(
        self,
        identifier: str,
        time_to_live: float | None = None,
        *,
        max_size: int | None = None,
        cache_time_to_live: float | None = None,
    ) -> Cache:
        cache = Cache(
            time_to_live,
            max_size=max_size,
            cache_time_to_live=cache_time_to_live,
            clock=self._clock,
        )
        with self._lock:
            self._caches[identifier] = cache
        return cache

    def get(self, identifier: str) -> Cache | None:
        with self._lock:
            return self._caches.get(identifier)

    def has(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._caches

    def destroy(self, identifier: str) -> Cache | None:
        with self._lock:
            return self._caches.pop(identifier, None)

    def identifiers(self) -> list[str]:
        with self._lock:
            return sorted(self._caches.keys())


_default_manager = CacheManager()


def default_cache_manager() -> CacheManager:
    return _default_manager
