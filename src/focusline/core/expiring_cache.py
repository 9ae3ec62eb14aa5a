"""Bounded key/value cache with insertion-order eviction and TTL expiry.

// [LAW:one-source-of-truth] Capacity and freshness rules live only in ExpiringCache.
// [LAW:no-shared-mutable-globals] Every cache is an explicit instance; clear() mutates in place.

Eviction is FIFO by insertion, not LRU: get() never refreshes recency and
overwriting an existing key keeps its original position. Callers that keep
hot keys alive by reading them will still see them evicted under pressure.

Removed keys leave a tombstone in the order list instead of shifting it.
Once the list grows past twice the capacity it is rebuilt from live keys.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]

_TOMBSTONE = object()


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


class ExpiringCache(Generic[K, V]):
    """FIFO cache with lazy and explicit TTL expiry.

    ttl_ms=None disables expiry. ttl_ms=0 expires an entry as soon as the
    clock has moved past its insertion time.
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_ms: float | None = 1000.0,
        clock: Clock = monotonic_ms,
    ) -> None:
        self._max_size = max(1, int(max_size))
        self._ttl_ms = None if ttl_ms is None else max(0.0, float(ttl_ms))
        self._clock = clock
        self._entries: dict[K, CacheEntry[V]] = {}
        self._order: list[object] = []
        self._index: dict[K, int] = {}

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_ms(self) -> float | None:
        return self._ttl_ms

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: CacheEntry[V], now: float) -> bool:
        return self._ttl_ms is not None and (now - entry.inserted_at) > self._ttl_ms

    def get(self, key: K, default: V | None = None) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if self._expired(entry, self._clock()):
            self._remove(key)
            return default
        return entry.value

    def set(self, key: K, value: V) -> V:
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None:
            # Overwrite in place: position in the eviction order is unchanged.
            entry.value = value
            entry.inserted_at = now
            return value

        if len(self._entries) >= self._max_size:
            self._evict_oldest()

        self._entries[key] = CacheEntry(value=value, inserted_at=now)
        self._index[key] = len(self._order)
        self._order.append(key)

        if len(self._order) > self._max_size * 2:
            self._compact()
        return value

    def gc(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        if self._ttl_ms is None:
            return 0
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in expired:
            self._remove(key)
        if expired:
            self._compact()
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
        self._order.clear()
        self._index.clear()

    def _remove(self, key: K) -> None:
        self._entries.pop(key, None)
        idx = self._index.pop(key, None)
        if idx is not None:
            self._order[idx] = _TOMBSTONE

    def _evict_oldest(self) -> None:
        for slot in self._order:
            if slot is not _TOMBSTONE:
                self._remove(slot)  # type: ignore[arg-type]
                return

    def _compact(self) -> None:
        live = [slot for slot in self._order if slot is not _TOMBSTONE and slot in self._entries]
        self._order[:] = live
        self._index.clear()
        self._index.update((key, i) for i, key in enumerate(live))
