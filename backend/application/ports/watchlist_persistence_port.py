from __future__ import annotations

from typing import Protocol, Sequence

from domain.movies import WatchlistItem


class WatchlistPersistencePort(Protocol):
    def load(self) -> list[WatchlistItem]:
        """Return persisted items in insertion order (empty when nothing is stored)."""
        ...

    def save(self, items: Sequence[WatchlistItem]) -> None:
        """Persist the full watchlist (best-effort; must not raise on I/O errors)."""
        ...
