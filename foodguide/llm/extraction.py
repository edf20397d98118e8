from __future__ import annotations

import json
import logging
import re
import uuid
from typing import Any

from pydantic import Field, ValidationError, field_validator

from ..search.config import DEFAULT_SEARCH_CONFIG, SearchConfig
from ..search.errors import MalformedResponse
from ..search.models import CamelModel, Restaurant, Review

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n?[ \t]*```", re.IGNORECASE | re.DOTALL)

_NULL_LINK_TOKENS = {"null", "none", "", "n/a"}


def normalize_reservation_link(value: Any) -> str | None:
    """Return the link unchanged, or ``None`` for non-strings and null-like tokens."""
    if not isinstance(value, str):
        return None
    if value.strip().lower() in _NULL_LINK_TOKENS:
        return None
    return value


class RestaurantPayload(CamelModel):
    """One element of the model's JSON array, before ingestion."""

    name: str
    cuisine: str
    rating: float | None = None
    review_count: int | None = None
    address: str
    description: str = ""
    price_level: str = ""
    reviews: list[Review] = Field(default_factory=list)
    reservation_link: str | None = None
    google_maps_url: str | None = None
    image_url: str | None = None

    @field_validator("reservation_link", mode="before")
    @classmethod
    def _null_link(cls, value: Any) -> str | None:
        return normalize_reservation_link(value)

    @field_validator("description", "price_level", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("reviews", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


def find_json_block(text: str) -> str:
    """Return the contents of the first ```json fenced block in ``text``."""
    match = _JSON_FENCE_RE.search(text or "")
    if not match:
        raise MalformedResponse("no ```json fenced block in model response")
    return match.group(1)


def extract_restaurants(
    text: str,
    config: SearchConfig = DEFAULT_SEARCH_CONFIG,
) -> list[Restaurant]:
    """
    Parse Gemini's free-form answer into Restaurant records.

    Array order is kept as display order. An empty array yields an empty
    list. Every other deviation raises ``MalformedResponse``.
    """
    block = find_json_block(text)

    try:
        data = json.loads(block)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"fenced block is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise MalformedResponse(f"expected a JSON array, got {type(data).__name__}")

    batch = uuid.uuid4().hex[:8]
    restaurants: list[Restaurant] = []
    for index, item in enumerate(data):
        try:
            payload = RestaurantPayload.model_validate(item)
        except ValidationError as exc:
            raise MalformedResponse(f"restaurant #{index} failed validation: {exc}") from exc

        fields = payload.model_dump(exclude={"image_url"})
        restaurants.append(
            Restaurant(
                **fields,
                id=f"rest-{batch}-{index}",
                image_url=payload.image_url or config.placeholder_image_url(payload.name),
            )
        )

    logger.debug("Extracted %d restaurants from model response", len(restaurants))
    return restaurants
