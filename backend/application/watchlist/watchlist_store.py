from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable, Optional

from application.common.observable import Observable
from application.ports.watchlist_persistence_port import WatchlistPersistencePort
from domain.movies import Movie, WatchlistItem

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistStore(Observable[tuple[WatchlistItem, ...]]):
    """The single shared, deduplicated watchlist.

    All mutations go through one re-entrant lock, so concurrent callers see a
    serial history: each mutation is persisted and published before
    the next one starts. Subscribers get the full item tuple after every
    committed change.
    """

    def __init__(
        self,
        *,
        persistence: WatchlistPersistencePort,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__()
        self._persistence = persistence
        self._clock = clock or _utc_now
        self._lock = threading.RLock()
        self._items: OrderedDict[int, WatchlistItem] = OrderedDict()

        for item in persistence.load():
            if item.id in self._items:
                logger.warning("dropping duplicate persisted watchlist entry id=%s", item.id)
                continue
            self._items[item.id] = item
        logger.info("watchlist loaded: %s items", len(self._items))

    # ----- reads -----

    @property
    def items(self) -> tuple[WatchlistItem, ...]:
        with self._lock:
            return tuple(self._items.values())

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def contains(self, movie: Movie) -> bool:
        with self._lock:
            return movie.id in self._items

    def contains_id(self, movie_id: int) -> bool:
        with self._lock:
            return int(movie_id) in self._items

    def get(self, movie_id: int) -> Optional[WatchlistItem]:
        with self._lock:
            return self._items.get(int(movie_id))

    def ids(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._items)

    # ----- mutations -----

    def add(self, movie: Movie) -> WatchlistItem:
        """Insert `movie` unless its id is already present; return the stored item."""
        with self._lock:
            existing = self._items.get(movie.id)
            if existing is not None:
                return existing
            item = WatchlistItem(movie=movie, date_added=self._clock())
            self._items[movie.id] = item
            self._commit("add", movie.id)
            return item

    def remove(self, movie: Movie) -> bool:
        return self.remove_id(movie.id)

    def remove_id(self, movie_id: int) -> bool:
        with self._lock:
            if self._items.pop(int(movie_id), None) is None:
                return False
            self._commit("remove", movie_id)
            return True

    def toggle(self, movie: Movie) -> bool:
        """Flip membership atomically; return True when the movie is now present."""
        with self._lock:
            if movie.id in self._items:
                self.remove(movie)
                return False
            self.add(movie)
            return True

    def clear_all(self) -> None:
        with self._lock:
            if not self._items:
                return
            self._items.clear()
            self._commit("clear", None)

    def _commit(self, action: str, movie_id: Optional[int]) -> None:
        snapshot = tuple(self._items.values())
        logger.debug("watchlist %s id=%s count=%s", action, movie_id, len(snapshot))
        self._persistence.save(snapshot)
        self._publish(snapshot)
