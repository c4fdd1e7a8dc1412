"""
Mood Intelligence Score.

A hand-tuned heuristic, not a learned model: a stable, explainable ranking
from rating, distance and price level, nudged by keywords in the mood.

    score = 100
          + (rating - 4.0) * 25            when a rating is known
          - distance_km * 8
          + budget / date adjustments     (see below)

The result is rounded half-up and floored at 0.
"""
from __future__ import annotations

import math

from .models import Place

BASE_SCORE = 100.0
RATING_PIVOT = 4.0
RATING_WEIGHT = 25.0
DISTANCE_PENALTY_PER_KM = 8.0

_BUDGET_KEYWORDS = ("budget", "cheap")
_DATE_KEYWORDS = ("date", "romantic")

_BUDGET_PRICE_ADJUSTMENT = {"$": 30.0, "$$": 10.0, "$$$$": -50.0}
_DATE_PRICE_BONUS = 20.0
_DATE_RATING_BONUS = 15.0
_DATE_RATING_THRESHOLD = 4.5


def calculate_intelligence_score(place: Place, mood: str) -> int:
    score = BASE_SCORE

    if place.rating is not None:
        score += (place.rating - RATING_PIVOT) * RATING_WEIGHT

    score -= place.distance_km * DISTANCE_PENALTY_PER_KM

    lower_mood = mood.lower()

    # Budget mood loves cheap places
    if any(k in lower_mood for k in _BUDGET_KEYWORDS):
        score += _BUDGET_PRICE_ADJUSTMENT.get(place.price_level or "", 0.0)

    # Date mood loves high price/quality
    if any(k in lower_mood for k in _DATE_KEYWORDS):
        if place.price_level in ("$$$", "$$$$"):
            score += _DATE_PRICE_BONUS
        if place.rating is not None and place.rating > _DATE_RATING_THRESHOLD:
            score += _DATE_RATING_BONUS

    return max(0, math.floor(score + 0.5))


def score_places(places: list[Place], mood: str) -> list[Place]:
    """Return copies of *places* with ``intelligence_score`` filled in."""
    return [
        p.model_copy(update={"intelligence_score": calculate_intelligence_score(p, mood)})
        for p in places
    ]
