from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from application.common.observable import Observable
from application.ports.movie_catalog_port import MovieCatalogPort
from application.recommendation.recommendation_engine import RecommendationEngine
from application.watchlist.watchlist_store import WatchlistStore
from domain.catalog import NetworkError
from domain.movies import Movie

logger = logging.getLogger(__name__)

_CATEGORIES = ("trending", "popular", "top_rated")


class RecommendationState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class TonightSnapshot:
    state: RecommendationState
    recommendations: tuple[Movie, ...]
    is_loading: bool
    error: Optional[NetworkError]
    generated_at: Optional[datetime]


class TonightService(Observable[TonightSnapshot]):
    """Holds tonight's recommendations and refreshes them from the catalog.

    Only the most recently started refresh may commit; an older refresh that
    finishes late is dropped. Results are a snapshot of the watchlist at
    computation time and are not recomputed on watchlist changes.
    """

    def __init__(
        self,
        *,
        catalog: MovieCatalogPort,
        store: WatchlistStore,
        engine: Optional[RecommendationEngine] = None,
    ) -> None:
        super().__init__()
        self._catalog = catalog
        self._store = store
        self._engine = engine or RecommendationEngine()
        self._state = RecommendationState.IDLE
        self._recommendations: tuple[Movie, ...] = ()
        self._error: Optional[NetworkError] = None
        self._generated_at: Optional[datetime] = None
        self._generation = 0

    @property
    def state(self) -> RecommendationState:
        return self._state

    @property
    def recommendations(self) -> list[Movie]:
        return list(self._recommendations)

    @property
    def is_loading(self) -> bool:
        return self._state is RecommendationState.LOADING

    @property
    def error(self) -> Optional[NetworkError]:
        return self._error

    def snapshot(self) -> TonightSnapshot:
        return TonightSnapshot(
            state=self._state,
            recommendations=self._recommendations,
            is_loading=self.is_loading,
            error=self._error,
            generated_at=self._generated_at,
        )

    def is_in_watchlist(self, movie: Movie) -> bool:
        return self._store.contains(movie)

    def toggle_watchlist(self, movie: Movie) -> bool:
        return self._store.toggle(movie)

    def _settled_state(self) -> RecommendationState:
        # Stale results stay visible next to an error.
        if self._recommendations:
            return RecommendationState.READY
        if self._error is not None:
            return RecommendationState.FAILED
        return RecommendationState.IDLE

    async def ensure_loaded(self) -> list[Movie]:
        if self._recommendations or self.is_loading:
            return self.recommendations
        return await self.generate_recommendations()

    async def refresh(self) -> list[Movie]:
        return await self.generate_recommendations()

    async def generate_recommendations(self) -> list[Movie]:
        self._generation += 1
        generation = self._generation
        self._state = RecommendationState.LOADING
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
                self._state = self._settled_state()
                self._publish(self.snapshot())
            raise

        if generation != self._generation:
            logger.debug("tonight refresh %s superseded by %s", generation, self._generation)
            return self.recommendations

        pages: list[tuple[Movie, ...]] = []
        errors: list[NetworkError] = []
        for category, result in zip(_CATEGORIES, results):
            if isinstance(result, NetworkError):
                logger.warning("tonight: %s fetch failed: %s", category, result)
                errors.append(result)
                pages.append(())
            elif isinstance(result, Exception):
                logger.exception("tonight: %s fetch crashed", category, exc_info=result)
                errors.append(NetworkError(str(result), cause=result))
                pages.append(())
            elif isinstance(result, BaseException):
                raise result
            else:
                pages.append(tuple(result.results))

        if len(errors) == len(_CATEGORIES):
            self._error = errors[0]
            self._state = self._settled_state()
            self._publish(self.snapshot())
            return self.recommendations

        trending, popular, top_rated = pages
        recommendations = self._engine.generate(
            watchlist=self._store.items,
            trending=trending,
            popular=popular,
            top_rated=top_rated,
        )
        self._recommendations = tuple(recommendations)
        self._error = None
        self._generated_at = datetime.now(timezone.utc)
        self._state = RecommendationState.READY
        logger.info(
            "tonight: %s recommendations (failed categories=%s, watchlist=%s)",
            len(recommendations),
            len(errors),
            self._store.count,
        )
        self._publish(self.snapshot())
        return self.recommendations
