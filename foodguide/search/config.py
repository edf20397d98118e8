from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from .models import CuisineCategory


@dataclass(frozen=True)
class SearchConfig:
    """
    Configuration for result normalization and the search session.
    """

    default_category: CuisineCategory = CuisineCategory.RECOMMENDED
    placeholder_image_template: str = "https://picsum.photos/seed/{seed}/{width}/{height}"
    placeholder_width: int = 400
    placeholder_height: int = 300

    def placeholder_image_url(self, name: str) -> str:
        return self.placeholder_image_template.format(
            seed=quote(name, safe=""),
            width=self.placeholder_width,
            height=self.placeholder_height,
        )


DEFAULT_SEARCH_CONFIG = SearchConfig()
