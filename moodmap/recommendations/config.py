from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")


def _env_number(name: str, cast: Callable[[str], T]) -> T | None:
    raw = os.getenv(name, "").strip()
    return cast(raw) if raw else None


@dataclass(frozen=True)
class CacheConfig:
    """
    Recommendation cache tuning.

    All knobs default to ``None``: exact (mood, lat, lon) keys, no expiry,
    unbounded size.
    """

    ttl_seconds: float | None = _env_number("MOODMAP_CACHE_TTL_SECONDS", float)
    max_entries: int | None = _env_number("MOODMAP_CACHE_MAX_ENTRIES", int)
    # Decimal places coordinates are rounded to before keying
    coordinate_precision: int | None = _env_number("MOODMAP_CACHE_COORD_PRECISION", int)


DEFAULT_CACHE_CONFIG = CacheConfig()
