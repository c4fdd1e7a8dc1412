"""
Grounded response parsing.

Turns the grounding chunks Gemini attaches to its answer into ``Place``
records, de-duplicated by title, and mines the free-text answer for the
attributes the chunks do not carry (rating, price level).

Fields the upstream service never supplies (distance, and rating when the
text does not mention one) are synthesized from ``rng``. They are
approximations, not measurements.
"""
from __future__ import annotations

import logging
import math
import random
import re
import time
from typing import Any, Sequence

from pydantic import ValidationError

from .models import GroundingChunk, Place, PriceLevel

logger = logging.getLogger(__name__)

PRICE_LEVELS: tuple[PriceLevel, ...] = ("$$$$", "$$$", "$$", "$")
DEFAULT_PRICE_TAG = "$$"
MAX_SYNTHETIC_DISTANCE_KM = 5.0
MAX_RATING = 5.0


def extract_rating(text: str, title: str) -> float | None:
    """Find "<title> ... 4.5 stars" in *text*; first match wins."""
    if not text or not title:
        return None
    pattern = re.compile(re.escape(title) + r".*?([0-5]\.[0-9])\s*stars?", re.IGNORECASE)
    match = pattern.search(text)
    if match:
        rating = float(match.group(1))
        # "5.9 stars" is noise, not a rating
        return rating if rating <= MAX_RATING else None
    return None


def extract_price_level(text: str) -> PriceLevel | None:
    """Return the longest run of ``$`` present anywhere in *text*."""
    if not text:
        return None
    for level in PRICE_LEVELS:
        if level in text:
            return level
    return None


def _resolve_reference(chunk: GroundingChunk) -> tuple[str | None, str | None]:
    if chunk.maps is not None:
        return chunk.maps.title, chunk.maps.google_maps_uri or chunk.maps.uri
    if chunk.web is not None:
        return chunk.web.title, chunk.web.uri
    return None, None


def _synthetic_rating(rng: random.Random) -> float:
    return 4.0 + rng.random()


def _synthetic_distance(rng: random.Random) -> float:
    # One decimal, kept strictly below the cap
    return math.floor(rng.random() * MAX_SYNTHETIC_DISTANCE_KM * 10) / 10


def parse_places(
    raw_text: str,
    chunks: Sequence[Any] | None,
    mood: str,
    rng: random.Random | None = None,
    generated_at: int | None = None,
) -> list[Place]:
    if not chunks:
        return []

    rng = rng or random.Random()
    stamp = generated_at if generated_at is not None else int(time.time() * 1000)
    price_level = extract_price_level(raw_text)

    places: list[Place] = []
    seen_titles: set[str] = set()

    for index, raw_chunk in enumerate(chunks):
        try:
            chunk = GroundingChunk.model_validate(raw_chunk)
        except ValidationError:
            logger.debug("Skipping malformed grounding chunk at index %d", index)
            continue

        title, uri = _resolve_reference(chunk)
        if not title or not uri:
            continue
        if title in seen_titles:
            continue
        seen_titles.add(title)

        rating = extract_rating(raw_text, title)
        if rating is None:
            rating = _synthetic_rating(rng)

        places.append(Place(
            id=f"place-{index}-{stamp}",
            title=title,
            google_maps_uri=uri,
            rating=rating,
            price_level=price_level,
            distance_km=_synthetic_distance(rng),
            tags=[mood, price_level or DEFAULT_PRICE_TAG],
            description=f"Recommended for your {mood} mood.",
        ))

    return places
