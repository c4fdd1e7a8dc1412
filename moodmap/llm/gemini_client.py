from __future__ import annotations

import logging
from typing import Any, Protocol

from google import genai
from google.genai import types

from ..recommendations.models import GeoLocation, GroundedResponse
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class GroundingClient(Protocol):
    async def fetch(self, prompt: str, anchor: GeoLocation) -> GroundedResponse: ...


def _build_generate_config(anchor: GeoLocation) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        tools=[types.Tool(google_maps=types.GoogleMaps())],
        tool_config=types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(
                    latitude=anchor.latitude,
                    longitude=anchor.longitude,
                ),
            ),
        ),
    )


def _dump_chunk(chunk: Any) -> Any:
    if hasattr(chunk, "model_dump"):
        return chunk.model_dump(exclude_none=True)
    return chunk


class GeminiGroundingClient:
    """
    Gemini client with Google Maps grounding.

    The underlying ``genai.Client`` is built on first use so that a missing
    API key only fails the request that needs it, not application start-up.
    """

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG) -> None:
        self.config = config
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.config.enabled:
                raise ConfigurationError("Gemini grounding is disabled (LLMConfig.enabled=False).")
            if not self.config.api_key:
                raise ConfigurationError(
                    "GEMINI_API_KEY is not set. Add it to the environment or the .env file."
                )
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    async def fetch(self, prompt: str, anchor: GeoLocation) -> GroundedResponse:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=_build_generate_config(anchor),
            )
        except Exception as exc:
            raise UpstreamError(f"Gemini call failed: {exc}") from exc

        candidates = response.candidates
        if not candidates:
            raise UpstreamError("No candidates returned from Gemini.")

        metadata = candidates[0].grounding_metadata
        raw_chunks = metadata.grounding_chunks if metadata is not None else None
        chunks = [_dump_chunk(c) for c in raw_chunks] if raw_chunks else None

        logger.debug(
            "Gemini returned %d grounding chunks for (%s, %s)",
            len(chunks or []),
            anchor.latitude,
            anchor.longitude,
        )
        return GroundedResponse(text=response.text or "", grounding_chunks=chunks)
