"""
Bounded in-process cache with TTL and LRU eviction.

Fronts the geocoding service so repeated look-ups of the same place name
do not hit the network.  Entries expire ``ttl_seconds`` after insertion;
once ``max_entries`` is reached the least-recently-used entry is evicted.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Hashable


@dataclass
class _CacheEntry:
    inserted_at: float
    value: Any


class BoundedTTLCache:
    def __init__(
        self,
        *,
        max_entries: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max(1, int(max_entries))
        self._ttl = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._lock = Lock()
        self._items: OrderedDict[Hashable, _CacheEntry] = OrderedDict()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _is_expired(self, entry: _CacheEntry) -> bool:
        return (self._clock() - entry.inserted_at) > self._ttl

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                self._misses += 1
                return default

            if self._is_expired(entry):
                del self._items[key]
                self._misses += 1
                return default

            self._items.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
            self._items[key] = _CacheEntry(inserted_at=self._clock(), value=value)

            while len(self._items) > self._max_entries:
                self._items.popitem(last=False)
                self._evictions += 1

    def clear(self) -> int:
        with self._lock:
            cleared = len(self._items)
            self._items.clear()
            return cleared

    def snapshot(self) -> dict[str, float]:
        with self._lock:
            return {
                "size": len(self._items),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "ttl_seconds": self._ttl,
                "max_entries": self._max_entries,
            }
