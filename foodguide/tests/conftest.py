from __future__ import annotations

import copy
import json

import pytest

SAMPLE_RESTAURANTS = [
    {
        "name": "Fika Fika Cafe",
        "cuisine": "Cafe",
        "rating": 4.6,
        "reviewCount": 3200,
        "address": "No. 33, Yitong St, Zhongshan District, Taipei",
        "description": "Award-winning roasts in a bright Nordic room.",
        "priceLevel": "$$",
        "reviews": [
            {"author": "Amy", "rating": 5, "text": "Best pour-over in town."},
            {"author": "Ben", "rating": 3, "text": "Great coffee, hard to find a seat."},
        ],
        "reservationLink": "https://inline.app/booking/fika",
        "googleMapsUrl": "https://maps.google.com/?cid=1",
    },
    {
        "name": "Simple Kaffa",
        "cuisine": "Cafe",
        "rating": 4.5,
        "reviewCount": 2100,
        "address": "No. 1, Lane 177, Dunhua S Rd, Taipei",
        "description": "Champion barista, tiny basement shop.",
        "priceLevel": "$$$",
        "reviews": [],
        "reservationLink": "null",
        "googleMapsUrl": "https://maps.google.com/?cid=2",
    },
]


def _fenced(payload, prose: str = "Here are the best spots near you:") -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"{prose}\n\n```json\n{body}\n```\n\nEnjoy your meal!"


@pytest.fixture
def sample_restaurants() -> list[dict]:
    return copy.deepcopy(SAMPLE_RESTAURANTS)


@pytest.fixture
def fenced():
    """Wrap a payload in model-style prose and a ```json fence."""
    return _fenced


@pytest.fixture
def sample_response_text(sample_restaurants) -> str:
    return _fenced(sample_restaurants)
