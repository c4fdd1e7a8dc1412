from __future__ import annotations

import asyncio
import random

from fastapi.testclient import TestClient

from moodmap.app import app, get_recommendation_service
from moodmap.llm.config import LLMConfig
from moodmap.llm.errors import ConfigurationError, UpstreamError
from moodmap.recommendations.cache import RecommendationCache
from moodmap.recommendations.config import CacheConfig
from moodmap.recommendations.models import GroundedResponse
from moodmap.recommendations.service import RecommendationService

client = TestClient(app)

LOCATION = {"latitude": 37.7749, "longitude": -122.4194}

SAMPLE_TEXT = (
    "Tartine Bakery is a classic, 4.7 stars ($$$).\n"
    "Sightglass Coffee offers roomy tables, 4.3 stars.\n"
)

SAMPLE_CHUNKS = [
    {"maps": {"title": "Tartine Bakery", "uri": "https://maps.google.com/?cid=11"}},
    {"maps": {"title": "Sightglass Coffee", "uri": "https://maps.google.com/?cid=12"}},
    {"maps": {"title": "Tartine Bakery", "uri": "https://maps.google.com/?cid=13"}},
]


class FakeGroundingClient:
    def __init__(self, response=None, error=None):
        self.response = response or GroundedResponse(text=SAMPLE_TEXT, grounding_chunks=SAMPLE_CHUNKS)
        self.error = error
        self.calls = 0

    async def fetch(self, prompt, anchor):
        self.calls += 1
        if self.error is not None:
            raise self.error
        await asyncio.sleep(0)
        return self.response


def _use_service(fake) -> RecommendationService:
    service = RecommendationService(
        client=fake,
        cache=RecommendationCache(CacheConfig()),
        config=LLMConfig(api_key="test-key"),
        rng=random.Random(3),
    )
    app.dependency_overrides[get_recommendation_service] = lambda: service
    return service


def teardown_function():
    app.dependency_overrides.clear()


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_moods_lists_presets():
    resp = client.get("/moods")
    assert resp.status_code == 200
    labels = [m["label"] for m in resp.json()]
    assert labels == ["Work Mode", "Date Night", "Quick Bite", "Budget", "Cozy", "Party"]


def test_recommendations_returns_ranked_places():
    _use_service(FakeGroundingClient())
    resp = client.post("/recommendations", json={"mood": "Date Night", "location": LOCATION})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    titles = [p["title"] for p in body["places"]]
    assert sorted(titles) == ["Sightglass Coffee", "Tartine Bakery"]
    scores = [p["intelligenceScore"] for p in body["places"]]
    assert scores == sorted(scores, reverse=True)


def test_recommendations_use_camel_case_keys():
    _use_service(FakeGroundingClient())
    resp = client.post("/recommendations", json={"mood": "Cozy", "location": LOCATION})
    place = resp.json()["places"][0]
    for key in ("id", "title", "googleMapsUri", "rating", "priceLevel", "distanceKm", "tags",
                "description", "intelligenceScore"):
        assert key in place


def test_recommendations_cached_on_repeat():
    fake = FakeGroundingClient()
    service = _use_service(fake)
    payload = {"mood": "Cozy", "location": LOCATION}
    first = client.post("/recommendations", json=payload).json()
    second = client.post("/recommendations", json=payload).json()
    assert fake.calls == 1
    assert first == second
    assert service.cache.stats()["hits"] == 1


def test_recommendations_empty_when_nothing_grounded():
    _use_service(FakeGroundingClient(GroundedResponse(text="Nothing nearby.", grounding_chunks=None)))
    resp = client.post("/recommendations", json={"mood": "Party", "location": LOCATION})
    assert resp.status_code == 200
    assert resp.json() == {"places": [], "total": 0}


def test_upstream_error_maps_to_bad_gateway():
    _use_service(FakeGroundingClient(error=UpstreamError("No candidates returned from Gemini.")))
    resp = client.post("/recommendations", json={"mood": "Party", "location": LOCATION})
    assert resp.status_code == 502
    assert "No candidates" in resp.json()["detail"]


def test_missing_credentials_map_to_server_error():
    _use_service(FakeGroundingClient(error=ConfigurationError("GEMINI_API_KEY is not set.")))
    resp = client.post("/recommendations", json={"mood": "Party", "location": LOCATION})
    assert resp.status_code == 500


def test_validation_rejects_empty_mood():
    resp = client.post("/recommendations", json={"mood": "", "location": LOCATION})
    assert resp.status_code == 422


def test_validation_rejects_bad_latitude():
    resp = client.post(
        "/recommendations",
        json={"mood": "Cozy", "location": {"latitude": 91.0, "longitude": 0.0}},
    )
    assert resp.status_code == 422


def test_cache_stats_endpoint():
    _use_service(FakeGroundingClient())
    payload = {"mood": "Budget", "location": LOCATION}
    client.post("/recommendations", json=payload)
    client.post("/recommendations", json=payload)
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["hits"] == 1
    assert body["misses"] == 1
    assert body["size"] == 1
    assert "hit_rate" in body
