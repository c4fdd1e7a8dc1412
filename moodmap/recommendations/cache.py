from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from .config import DEFAULT_CACHE_CONFIG, CacheConfig
from .models import Place

CacheKey = tuple[str, float, float]


@dataclass(frozen=True)
class _Entry:
    places: tuple[Place, ...]
    created_at: float


class RecommendationCache:
    """
    In-memory (mood, latitude, longitude) -> scored place list.

    Entries are replaced wholesale on ``set`` and handed out as fresh lists,
    so an entry is never mutated in place. Not persisted across restarts.
    """

    def __init__(
        self,
        config: CacheConfig = DEFAULT_CACHE_CONFIG,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._clock = clock
        self._entries: OrderedDict[CacheKey, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def make_key(self, mood: str, lat: float, lon: float) -> CacheKey:
        precision = self.config.coordinate_precision
        if precision is not None:
            lat, lon = round(lat, precision), round(lon, precision)
        return (mood, lat, lon)

    def _expired(self, entry: _Entry) -> bool:
        ttl = self.config.ttl_seconds
        return ttl is not None and self._clock() - entry.created_at >= ttl

    def get(self, mood: str, lat: float, lon: float) -> list[Place] | None:
        key = self.make_key(mood, lat, lon)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._expired(entry):
                self._entries.move_to_end(key)
                self._hits += 1
                return list(entry.places)
            if entry is not None:
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, mood: str, lat: float, lon: float, places: list[Place]) -> None:
        key = self.make_key(mood, lat, lon)
        entry = _Entry(places=tuple(places), created_at=self._clock())
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            max_entries = self.config.max_entries
            if max_entries is not None:
                while len(self._entries) > max_entries:
                    self._entries.popitem(last=False)
                    self._evictions += 1

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)
