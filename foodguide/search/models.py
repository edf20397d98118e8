from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CuisineCategory(str, Enum):
    RECOMMENDED = "Recommended"
    JAPANESE = "Japanese"
    ITALIAN = "Italian"
    CHINESE = "Chinese"
    CAFE = "Cafe"
    BBQ = "BBQ"
    VEGAN = "Vegan"
    BAR = "Bar"


class LoadingState(str, Enum):
    locating = "locating"
    idle = "idle"
    searching = "searching"
    success = "success"
    error = "error"


class GeoLocation(BaseModel):
    """WGS-84 decimal degrees. Range checks live in the request composer."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Review(CamelModel):
    author: str = ""
    rating: int | float | None = None
    text: str = ""

    @field_validator("author", "text", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Restaurant(CamelModel):
    id: str
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
    image_url: str


class CategoryRequest(BaseModel):
    category: CuisineCategory
