from __future__ import annotations

import asyncio
import logging
import random
import time

from ..analytics.store import SEARCH_EVENT, record_event
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.errors import UpstreamError
from ..llm.gemini_client import GroundingClient
from .cache import CacheKey, RecommendationCache
from .models import GeoLocation, Place
from .parser import parse_places
from .prompt import build_prompt
from .scoring import score_places

logger = logging.getLogger(__name__)


class RecommendationService:
    """
    cache check -> prompt -> grounded AI call -> parse/dedupe -> score -> sort -> cache.

    Concurrent requests for the same (mood, location) key are serialised so
    only the first one reaches the upstream service; the rest are served
    from the cache it fills.
    """

    def __init__(
        self,
        client: GroundingClient,
        cache: RecommendationCache | None = None,
        config: LLMConfig = DEFAULT_LLM_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else RecommendationCache()
        self.config = config
        self.rng = rng or random.Random()
        self._inflight: dict[CacheKey, asyncio.Lock] = {}
        self._waiters: dict[CacheKey, int] = {}

    async def fetch_recommendations(
        self,
        mood: str,
        location: GeoLocation,
        custom_prompt: str | None = None,
    ) -> list[Place]:
        start_time = time.time()
        key = self.cache.make_key(mood, location.latitude, location.longitude)
        lock = self._inflight.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1

        try:
            async with lock:
                # --- Cache check ---
                cached = self.cache.get(mood, location.latitude, location.longitude)
                if cached is not None:
                    self._record_search(mood, custom_prompt, start_time, cached, cache_hit=True)
                    return cached

                try:
                    places = await self._fetch_ranked(mood, location, custom_prompt)
                except UpstreamError:
                    logger.warning("Grounded recommendation call failed for mood %r", mood, exc_info=True)
                    self._record_search(mood, custom_prompt, start_time, [], upstream_error=True)
                    raise
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._inflight[key]

        self._record_search(mood, custom_prompt, start_time, places)
        return places

    async def _fetch_ranked(
        self,
        mood: str,
        location: GeoLocation,
        custom_prompt: str | None,
    ) -> list[Place]:
        prompt = build_prompt(mood, custom_prompt)

        try:
            response = await asyncio.wait_for(
                self.client.fetch(prompt, location),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise UpstreamError(f"Gemini did not respond within {self.config.timeout}s") from exc

        if not response.grounding_chunks:
            logger.warning("No grounding chunks found for mood %r", mood)
            return []

        parsed = parse_places(response.text, response.grounding_chunks, mood, rng=self.rng)
        scored = score_places(parsed, mood)
        # Stable: ties keep parse order
        ranked = sorted(scored, key=lambda p: p.intelligence_score, reverse=True)

        self.cache.set(mood, location.latitude, location.longitude, ranked)
        logger.info("Ranked %d places for mood %r", len(ranked), mood)
        return ranked

    def _record_search(
        self,
        mood: str,
        custom_prompt: str | None,
        start_time: float,
        places: list[Place],
        cache_hit: bool = False,
        upstream_error: bool = False,
    ) -> None:
        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        record_event(SEARCH_EVENT, {
            "mood": mood,
            "custom_prompt": bool(custom_prompt and custom_prompt.strip()),
            "results_returned": len(places),
            "response_time_ms": elapsed_ms,
            "cache_hit": cache_hit,
            "upstream_error": upstream_error,
        })
