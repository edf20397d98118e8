from __future__ import annotations

import math
from dataclasses import dataclass

from ..search.errors import InvalidInput
from ..search.models import CuisineCategory, GeoLocation
from .config import DEFAULT_LLM_CONFIG, LLMConfig

GOOGLE_MAPS_TOOL = "google_maps"

RESPONSE_SCHEMA = """\
[
  {
    "name": "string",
    "cuisine": "string",
    "rating": number,
    "reviewCount": number,
    "address": "string",
    "description": "string",
    "priceLevel": "string",
    "reviews": [
      {"author": "string", "rating": 5, "text": "string"}
    ],
    "reservationLink": "string | null",
    "googleMapsUrl": "string"
  }
]"""

SEARCH_PROMPT = """\
My current location is latitude: {lat}, longitude: {lng}.
Use Google Maps to find the {count} highest-rated "{category}" restaurants near me.

Write every description and review in {language}.

For each restaurant, provide:
1. Name
2. Cuisine type
3. Rating (1-5)
4. Total review count (estimate)
5. Full address
6. A short, catchy description
7. Price level ($, $$, $$$, $$$$)
8. 2-3 summary reviews from customers, covering both strengths and weaknesses
9. Reservation link:
   - First choice: a direct booking link on inline (inline.app), OpenTable, TableCheck or a similar platform.
   - Otherwise: the restaurant's official website or its Facebook/Instagram page.
   - Only return "null" when no web link can be found at all.
10. Google Maps URL

IMPORTANT: Output the result ONLY as a valid JSON array inside a ```json code block.
The JSON structure must match this exactly:
{schema}"""


@dataclass(frozen=True)
class SearchRequest:
    """Everything needed for one grounded Gemini call."""

    model: str
    prompt: str
    category: str
    latitude: float
    longitude: float
    temperature: float
    tools: tuple[str, ...] = (GOOGLE_MAPS_TOOL,)


def _category_text(category: CuisineCategory | str) -> str:
    if isinstance(category, CuisineCategory):
        return category.value
    if not isinstance(category, str) or not category.strip():
        raise InvalidInput("category must be a non-empty string")
    return category


def _validate_location(location: GeoLocation) -> None:
    lat, lng = location.lat, location.lng
    if not (math.isfinite(lat) and -90.0 <= lat <= 90.0):
        raise InvalidInput(f"latitude out of range: {lat}")
    if not (math.isfinite(lng) and -180.0 <= lng <= 180.0):
        raise InvalidInput(f"longitude out of range: {lng}")


def compose_request(
    location: GeoLocation,
    category: CuisineCategory | str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> SearchRequest:
    """
    Build the maps-grounded search request for ``category`` around ``location``.

    Raises ``InvalidInput`` for a blank category or coordinates outside
    ±90 / ±180.
    """
    category_text = _category_text(category)
    _validate_location(location)

    prompt = SEARCH_PROMPT.format(
        lat=location.lat,
        lng=location.lng,
        count=config.result_count,
        category=category_text,
        language=config.output_language,
        schema=RESPONSE_SCHEMA,
    )

    return SearchRequest(
        model=config.model,
        prompt=prompt,
        category=category_text,
        latitude=location.lat,
        longitude=location.lng,
        temperature=config.temperature,
    )
