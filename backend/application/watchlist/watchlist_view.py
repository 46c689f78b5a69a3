from __future__ import annotations

from typing import Iterable, Sequence

from application.watchlist.watchlist_store import WatchlistStore
from domain.movies import SortOption, WatchlistItem


def sort_watchlist(items: Iterable[WatchlistItem], option: SortOption) -> list[WatchlistItem]:
    """Order watchlist items for display. Pure: the input is never mutated."""
    ordered = list(items)
    if option is SortOption.DATE_ADDED:
        # Newest first; equal timestamps fall back to the later insertion first.
        ordered.reverse()
        ordered.sort(key=lambda i: i.date_added, reverse=True)
    elif option is SortOption.TITLE:
        ordered.sort(key=lambda i: (i.title.casefold(), i.id))
    elif option is SortOption.RATING:
        ordered.sort(key=lambda i: (-i.vote_average, -i.vote_count, i.id))
    else:
        raise ValueError(f"unsupported sort option: {option!r}")
    return ordered


class WatchlistView:
    """Sorted, read-only projection of the watchlist store.

    Nothing is cached: every read re-derives the ordering from the store, so
    switching `sort_option` or mutating the store is reflected immediately.
    """

    def __init__(self, *, store: WatchlistStore, sort_option: SortOption = SortOption.DATE_ADDED) -> None:
        self._store = store
        self.sort_option = sort_option

    @property
    def items(self) -> list[WatchlistItem]:
        return sort_watchlist(self._store.items, self.sort_option)

    @property
    def count(self) -> int:
        return self._store.count

    @property
    def is_empty(self) -> bool:
        return self._store.is_empty

    def remove_item(self, item: WatchlistItem) -> bool:
        return self._store.remove(item.movie)

    def share_text(self, items: Sequence[WatchlistItem] | None = None) -> str:
        """Plain-text summary of the watchlist in the current order."""
        rows = list(items) if items is not None else self.items
        if not rows:
            return "My watchlist is empty."
        lines = [f"My watchlist ({len(rows)} movies):"]
        for idx, item in enumerate(rows, 1):
            year = item.movie.release_year
            label = f"{item.title} ({year})" if year else item.title
            lines.append(f"{idx}. {label} - {item.movie.formatted_rating}/10")
        return "\n".join(lines)
