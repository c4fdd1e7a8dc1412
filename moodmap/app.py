from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .llm.config import DEFAULT_LLM_CONFIG
from .llm.errors import ConfigurationError, UpstreamError
from .llm.gemini_client import GeminiGroundingClient
from .recommendations.cache import RecommendationCache
from .recommendations.config import DEFAULT_CACHE_CONFIG
from .recommendations.models import (
    MoodPresetOut,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.moods import MOOD_PRESETS
from .recommendations.service import RecommendationService

app = FastAPI(title="MoodMap Recommendation API", version="1.0.0")


@lru_cache
def get_recommendation_service() -> RecommendationService:
    return RecommendationService(
        client=GeminiGroundingClient(DEFAULT_LLM_CONFIG),
        cache=RecommendationCache(DEFAULT_CACHE_CONFIG),
        config=DEFAULT_LLM_CONFIG,
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/moods", response_model=list[MoodPresetOut])
def moods() -> list[MoodPresetOut]:
    return [
        MoodPresetOut(id=p.id, label=p.label, prompt_context=p.prompt_context)
        for p in MOOD_PRESETS
    ]


@app.post("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    body: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationResponse:
    try:
        places = await service.fetch_recommendations(
            body.mood, body.location, body.custom_prompt,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return RecommendationResponse(places=places, total=len(places))


# ── Diagnostics ──────────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats(
    service: RecommendationService = Depends(get_recommendation_service),
) -> dict:
    return service.cache.stats()


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
