from __future__ import annotations

from enum import Enum


class SortOption(str, Enum):
    DATE_ADDED = "date_added"
    TITLE = "title"
    RATING = "rating"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    SortOption.DATE_ADDED: "Date Added",
    SortOption.TITLE: "Title",
    SortOption.RATING: "Rating",
}
