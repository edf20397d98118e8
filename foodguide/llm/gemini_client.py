from __future__ import annotations

import logging

from google import genai
from google.genai import types

from ..search.config import DEFAULT_SEARCH_CONFIG, SearchConfig
from ..search.errors import TransportFailure
from ..search.models import CuisineCategory, GeoLocation, Restaurant
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .extraction import extract_restaurants
from .prompts import SearchRequest, compose_request

logger = logging.getLogger(__name__)


def build_generate_config(request: SearchRequest) -> types.GenerateContentConfig:
    """Translate a SearchRequest into Gemini's maps-grounded generation config."""
    return types.GenerateContentConfig(
        tools=[types.Tool(google_maps=types.GoogleMaps())],
        tool_config=types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(
                    latitude=request.latitude,
                    longitude=request.longitude,
                ),
            ),
        ),
        temperature=request.temperature,
    )


def build_search_client(
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    search_config: SearchConfig = DEFAULT_SEARCH_CONFIG,
) -> RestaurantSearchClient:
    """Wrap explicit settings; the SDK client is created on the first search."""
    return RestaurantSearchClient(config=config, search_config=search_config)


def make_genai_client(config: LLMConfig = DEFAULT_LLM_CONFIG) -> genai.Client:
    http_options = None
    if config.timeout is not None:
        http_options = types.HttpOptions(timeout=int(config.timeout * 1000))
    return genai.Client(api_key=config.api_key or None, http_options=http_options)


class RestaurantSearchClient:
    """
    One grounded Gemini call per search.

    ``search`` raises ``InvalidInput`` before any network traffic,
    ``TransportFailure`` when the SDK client cannot be created, the call
    itself fails or returns no text, and ``MalformedResponse`` when the text
    cannot be turned into restaurants. Nothing is retried here.
    """

    def __init__(
        self,
        client: genai.Client | None = None,
        config: LLMConfig = DEFAULT_LLM_CONFIG,
        search_config: SearchConfig = DEFAULT_SEARCH_CONFIG,
    ) -> None:
        self._client = client
        self._config = config
        self._search_config = search_config

    def _genai_client(self) -> genai.Client:
        if self._client is None:
            try:
                self._client = make_genai_client(self._config)
            except Exception as exc:
                raise TransportFailure(f"Gemini client unavailable: {exc}") from exc
        return self._client

    async def search(
        self,
        location: GeoLocation,
        category: CuisineCategory | str,
    ) -> list[Restaurant]:
        request = compose_request(location, category, config=self._config)
        client = self._genai_client()

        try:
            response = await client.aio.models.generate_content(
                model=request.model,
                contents=request.prompt,
                config=build_generate_config(request),
            )
        except Exception as exc:
            raise TransportFailure(f"Gemini call failed: {exc}") from exc

        text = response.text
        if not text:
            raise TransportFailure("Gemini returned an empty response")

        restaurants = extract_restaurants(text, config=self._search_config)
        logger.info(
            "Search for %r at (%s, %s) returned %d restaurants",
            request.category,
            request.latitude,
            request.longitude,
            len(restaurants),
        )
        return restaurants
