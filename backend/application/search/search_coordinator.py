from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from application.common.observable import Observable
from application.ports.movie_catalog_port import MovieCatalogPort
from application.watchlist.watchlist_store import WatchlistStore
from domain.catalog import NetworkError
from domain.movies import Movie

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_S = 0.4
DEFAULT_MIN_QUERY_CHARS = 3


class SearchState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SEARCHING = "searching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchSnapshot:
    query: str
    state: SearchState
    results: tuple[Movie, ...]
    is_searching: bool
    error: Optional[NetworkError]


class SearchCoordinator(Observable[SearchSnapshot]):
    """Turns live query edits into debounced, cancelable catalog searches.

    Each accepted edit bumps a generation counter and cancels the pending
    debounce/in-flight task. A completed search commits only if its
    generation is still current, so `results` always belongs to the latest
    query; superseded completions are dropped without a state change.
    """

    def __init__(
        self,
        *,
        catalog: MovieCatalogPort,
        store: WatchlistStore,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        min_query_chars: int = DEFAULT_MIN_QUERY_CHARS,
    ) -> None:
        super().__init__()
        self._catalog = catalog
        self._store = store
        self._debounce_s = max(0.0, float(debounce_s))
        self._min_query_chars = max(1, int(min_query_chars))
        self._query = ""
        self._state = SearchState.IDLE
        self._results: tuple[Movie, ...] = ()
        self._error: Optional[NetworkError] = None
        self._generation = 0
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def search_query(self) -> str:
        return self._query

    @property
    def search_results(self) -> list[Movie]:
        return list(self._results)

    @property
    def is_searching(self) -> bool:
        return self._state is SearchState.SEARCHING

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def error(self) -> Optional[NetworkError]:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> SearchSnapshot:
        return SearchSnapshot(
            query=self._query,
            state=self._state,
            results=self._results,
            is_searching=self.is_searching,
            error=self._error,
        )

    def is_in_watchlist(self, movie: Movie) -> bool:
        return self._store.contains(movie)

    def toggle_watchlist(self, movie: Movie) -> bool:
        return self._store.toggle(movie)

    def set_query(self, text: str) -> Optional[asyncio.Task[None]]:
        """Record a query edit and schedule a debounced search when it is long enough.

        Returns the scheduled task (None when no search was scheduled). Must be
        called from a running event loop when a search gets scheduled.
        """
        self._query = text or ""
        generation = self._invalidate()
        if not self._accept_query():
            return None

        self._state = SearchState.DEBOUNCING
        self._publish(self.snapshot())
        self._task = asyncio.create_task(self._debounced(self._query.strip(), generation))
        return self._task

    async def search(self) -> list[Movie]:
        """Search the current query now, skipping the debounce (retry affordance)."""
        generation = self._invalidate()
        if not self._accept_query():
            return self.search_results
        task = asyncio.create_task(self._perform(self._query.strip(), generation))
        self._task = task
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                # Superseded by a newer query; the newer task owns the state.
                return self.search_results
            raise
        return self.search_results

    def clear_search(self) -> None:
        self._query = ""
        self._invalidate()
        self._results = ()
        self._error = None
        self._state = SearchState.IDLE
        self._publish(self.snapshot())

    async def close(self) -> None:
        task = self._task
        self._invalidate()
        if task is not None and not task.done():
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _invalidate(self) -> int:
        self._generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
        return self._generation

    def _accept_query(self) -> bool:
        trimmed = self._query.strip()
        if not trimmed:
            self._results = ()
            self._error = None
            self._state = SearchState.IDLE
            self._publish(self.snapshot())
            return False
        if len(trimmed) < self._min_query_chars:
            self._results = ()
            self._state = SearchState.IDLE
            self._publish(self.snapshot())
            return False
        return True

    async def _debounced(self, query: str, generation: int) -> None:
        await asyncio.sleep(self._debounce_s)
        if generation != self._generation:
            return
        await self._perform(query, generation)

    async def _perform(self, query: str, generation: int) -> None:
        self._state = SearchState.SEARCHING
        self._publish(self.snapshot())
        try:
            try:
                page = await self._catalog.search_movies(query, 1)
            except NetworkError:
                raise
            except Exception as exc:
                logger.exception("search %r crashed", query)
                raise NetworkError(str(exc), cause=exc) from exc
        except NetworkError as exc:
            if generation != self._generation:
                logger.debug("search %r failed after being superseded: %s", query, exc)
                return
            logger.warning("search %r failed: %s", query, exc)
            self._error = exc
            self._state = SearchState.FAILED
            self._publish(self.snapshot())
            return

        if generation != self._generation:
            logger.debug("dropping superseded search result for %r", query)
            return
        self._results = tuple(page.results)
        self._error = None
        self._state = SearchState.SUCCEEDED
        logger.debug("search %r -> %s results", query, len(self._results))
        self._publish(self.snapshot())
