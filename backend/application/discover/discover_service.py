from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from application.common.observable import Observable
from application.ports.movie_catalog_port import MovieCatalogPort
from application.watchlist.watchlist_store import WatchlistStore
from domain.catalog import NetworkError
from domain.movies import Movie

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoverSnapshot:
    trending: tuple[Movie, ...]
    popular: tuple[Movie, ...]
    top_rated: tuple[Movie, ...]
    is_loading: bool
    error: Optional[NetworkError]


class DiscoverService(Observable[DiscoverSnapshot]):
    """Trending / popular / top-rated rails.

    Categories load concurrently and independently: a failed category keeps
    its previous list, and the error is surfaced only when every category
    failed.
    """

    def __init__(self, *, catalog: MovieCatalogPort, store: WatchlistStore) -> None:
        super().__init__()
        self._catalog = catalog
        self._store = store
        self._lists: dict[str, tuple[Movie, ...]] = {"trending": (), "popular": (), "top_rated": ()}
        self._is_loading = False
        self._error: Optional[NetworkError] = None
        self._generation = 0

    @property
    def trending_movies(self) -> list[Movie]:
        return list(self._lists["trending"])

    @property
    def popular_movies(self) -> list[Movie]:
        return list(self._lists["popular"])

    @property
    def top_rated_movies(self) -> list[Movie]:
        return list(self._lists["top_rated"])

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[NetworkError]:
        return self._error

    def snapshot(self) -> DiscoverSnapshot:
        return DiscoverSnapshot(
            trending=self._lists["trending"],
            popular=self._lists["popular"],
            top_rated=self._lists["top_rated"],
            is_loading=self._is_loading,
            error=self._error,
        )

    def is_in_watchlist(self, movie: Movie) -> bool:
        return self._store.contains(movie)

    def toggle_watchlist(self, movie: Movie) -> bool:
        return self._store.toggle(movie)

    async def load_content(self) -> DiscoverSnapshot:
        self._generation += 1
        generation = self._generation
        self._is_loading = True
        self._publish(self.snapshot())

        try:
            results = await asyncio.gather(
                self._catalog.fetch_trending(1),
                self._catalog.fetch_popular(1),
                self._catalog.fetch_top_rated(1),
                return_exceptions=True,
            )
        except asyncio.CancelledError:
            if generation == self._generation:
                self._is_loading = False
                self._publish(self.snapshot())
            raise

        if generation != self._generation:
            return self.snapshot()

        errors: list[NetworkError] = []
        for category, result in zip(("trending", "popular", "top_rated"), results):
            if isinstance(result, NetworkError):
                logger.warning("discover: %s fetch failed: %s", category, result)
                errors.append(result)
            elif isinstance(result, Exception):
                logger.exception("discover: %s fetch crashed", category, exc_info=result)
                errors.append(NetworkError(str(result), cause=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                self._lists[category] = tuple(result.results)

        self._error = errors[0] if len(errors) == len(results) else None
        self._is_loading = False
        self._publish(self.snapshot())
        return self.snapshot()
