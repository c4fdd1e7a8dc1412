from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PriceLevel = Literal["$", "$$", "$$$", "$$$$"]


class GeoLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Place(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    google_maps_uri: str
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_level: PriceLevel | None = None
    distance_km: float = Field(default=0.0, ge=0.0)
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    intelligence_score: int = Field(default=0, ge=0)


# ── Grounding payloads ───────────────────────────────────────────────────


class MapsReference(BaseModel):
    title: str | None = None
    uri: str | None = None
    google_maps_uri: str | None = None


class WebReference(BaseModel):
    title: str | None = None
    uri: str | None = None


class GroundingChunk(BaseModel):
    maps: MapsReference | None = None
    web: WebReference | None = None


class GroundedResponse(BaseModel):
    text: str = ""
    grounding_chunks: list[Any] | None = None


# ── API I/O ──────────────────────────────────────────────────────────────


class RecommendationRequest(BaseModel):
    mood: str = Field(..., min_length=1, description='Canned mood label or free text, e.g. "Work Mode"')
    location: GeoLocation
    custom_prompt: str | None = Field(
        default=None, description="Free-text vibe; replaces the templated prompt when set"
    )


class RecommendationResponse(BaseModel):
    places: list[Place]
    total: int


class MoodPresetOut(BaseModel):
    id: str
    label: str
    prompt_context: str
