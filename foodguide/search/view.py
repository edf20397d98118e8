from __future__ import annotations

from typing import Any

from .models import CuisineCategory, LoadingState, Restaurant
from .session import SessionSnapshot

APP_TITLE = "Food Guide AI"
SKELETON_CARDS = 3
DEFAULT_PRICE_LEVEL = "$$"
NO_REVIEWS_LABEL = "No reviews yet"

_BOOKING_PLATFORMS = ("opentable", "tablecheck")


def reservation_action(link: str | None) -> dict[str, Any]:
    """Label the booking button by where the link points."""
    if not link:
        return {"enabled": False, "label": "No online booking", "icon": "ban", "href": None}

    lower = link.lower()
    if "inline.app" in lower:
        label, icon = "Book on inline", "mobile-screen-button"
    elif any(platform in lower for platform in _BOOKING_PLATFORMS):
        label, icon = "Book online", "calendar-check"
    else:
        label, icon = "Book / website", "external-link-alt"
    return {"enabled": True, "label": label, "icon": icon, "href": link}


def _review_count_label(count: int | None) -> str:
    if not isinstance(count, int) or count < 0:
        return "Reviews"
    return f"({count}+ reviews)"


def render_card(restaurant: Restaurant) -> dict[str, Any]:
    return {
        "id": restaurant.id,
        "name": restaurant.name,
        "cuisine": restaurant.cuisine,
        "imageUrl": restaurant.image_url,
        "priceLevel": restaurant.price_level or DEFAULT_PRICE_LEVEL,
        "rating": restaurant.rating,
        "reviewCountLabel": _review_count_label(restaurant.review_count),
        "description": restaurant.description,
        "address": restaurant.address,
        "mapsUrl": restaurant.google_maps_url,
        "reservation": reservation_action(restaurant.reservation_link),
        "reviews": [review.model_dump(by_alias=True) for review in restaurant.reviews],
        "noReviews": not restaurant.reviews,
        "noReviewsLabel": None if restaurant.reviews else NO_REVIEWS_LABEL,
    }


def render_category_filter(snapshot: SessionSnapshot) -> list[dict[str, Any]]:
    disabled = snapshot.state in (LoadingState.locating, LoadingState.searching)
    return [
        {
            "label": category.value,
            "selected": category.value == snapshot.selected_category,
            "disabled": disabled,
        }
        for category in CuisineCategory
    ]


def _render_body(snapshot: SessionSnapshot) -> dict[str, Any]:
    state = snapshot.state
    category = snapshot.selected_category

    if state == LoadingState.locating:
        return {
            "title": "Locating you...",
            "message": "Please allow location access so we can find food nearby.",
        }

    if state == LoadingState.error:
        return {
            "title": "Oops! Something went wrong",
            "message": snapshot.error_message,
            "action": {"event": "retry", "label": "Retry"},
        }

    if state in (LoadingState.idle, LoadingState.searching):
        return {
            "banner": f'AI is searching for the best "{category}" restaurants...',
            "skeletons": SKELETON_CARDS,
        }

    if not snapshot.restaurants:
        return {
            "title": f"Nearby {category}",
            "empty": True,
            "message": "No restaurants in this category nearby.",
            "action": {
                "event": "categorySelected",
                "category": CuisineCategory.RECOMMENDED.value,
                "label": f"See {CuisineCategory.RECOMMENDED.value}",
            },
        }

    return {
        "title": f"Nearby {category}",
        "badge": "AI picks",
        "empty": False,
        "cards": [render_card(r) for r in snapshot.restaurants],
    }


def render(snapshot: SessionSnapshot) -> dict[str, Any]:
    """Pure function of session state: the whole page as a view model."""
    return {
        "state": snapshot.state.value,
        "header": {"title": APP_TITLE, "located": snapshot.location_known},
        "categories": render_category_filter(snapshot),
        "selectedCategory": snapshot.selected_category,
        "body": _render_body(snapshot),
    }
