import asyncio
import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.recommendation.recommendation_engine import RecommendationEngine
from application.recommendation.tonight_service import RecommendationState, TonightService
from application.watchlist.watchlist_store import WatchlistStore
from domain.catalog import HTTPStatusError, TransportError
from domain.config import RecommendationRules
from domain.movies import Movie, MoviePage
from infrastructure.persistence.watchlist.json_watchlist_store import NullWatchlistPersistence


def _movie(movie_id: int) -> Movie:
    return Movie(id=movie_id, title=f"Movie {movie_id}", vote_average=7.0, vote_count=500, popularity=10.0)


def _page(*ids: int) -> MoviePage:
    return MoviePage(page=1, results=tuple(_movie(i) for i in ids))


class _StubCatalog:
    def __init__(self) -> None:
        self.pages = {"trending": _page(1, 2), "popular": _page(2, 3), "top_rated": _page(4)}
        self.errors: dict[str, Exception] = {}
        self.gate: asyncio.Event | None = None
        self.calls = 0

    async def _get(self, category: str) -> MoviePage:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if category in self.errors:
            raise self.errors[category]
        return self.pages[category]

    async def fetch_trending(self, page: int = 1) -> MoviePage:
        return await self._get("trending")

    async def fetch_popular(self, page: int = 1) -> MoviePage:
        return await self._get("popular")

    async def fetch_top_rated(self, page: int = 1) -> MoviePage:
        return await self._get("top_rated")


class TestTonightService(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.catalog = _StubCatalog()
        self.store = WatchlistStore(persistence=NullWatchlistPersistence())
        self.service = TonightService(
            catalog=self.catalog,
            store=self.store,
            engine=RecommendationEngine(rules=RecommendationRules()),
        )

    async def test_generate_merges_categories_and_skips_watchlist(self) -> None:
        self.store.add(_movie(3))
        states: list[RecommendationState] = []
        self.service.subscribe(lambda snap: states.append(snap.state))

        picks = await self.service.generate_recommendations()

        self.assertEqual(sorted(m.id for m in picks), [1, 2, 4])
        self.assertEqual(self.service.state, RecommendationState.READY)
        self.assertFalse(self.service.is_loading)
        self.assertIsNone(self.service.error)
        self.assertIsNotNone(self.service.snapshot().generated_at)
        self.assertEqual(states, [RecommendationState.LOADING, RecommendationState.READY])

    async def test_partial_failure_still_produces_picks(self) -> None:
        self.catalog.errors["popular"] = TransportError("offline")
        picks = await self.service.generate_recommendations()
        self.assertEqual(sorted(m.id for m in picks), [1, 2, 4])
        self.assertIsNone(self.service.error)

    async def test_total_failure_without_prior_results_fails(self) -> None:
        first = HTTPStatusError(503)
        self.catalog.errors = {
            "trending": first,
            "popular": TransportError("offline"),
            "top_rated": TransportError("offline"),
        }
        picks = await self.service.generate_recommendations()
        self.assertEqual(picks, [])
        self.assertEqual(self.service.state, RecommendationState.FAILED)
        self.assertIs(self.service.error, first)

    async def test_total_failure_keeps_previous_picks(self) -> None:
        before = await self.service.generate_recommendations()
        self.catalog.errors = {c: TransportError("offline") for c in ("trending", "popular", "top_rated")}
        after = await self.service.refresh()
        self.assertEqual([m.id for m in after], [m.id for m in before])
        self.assertEqual(self.service.state, RecommendationState.READY)
        self.assertIsInstance(self.service.error, TransportError)

        # A later success clears the error.
        self.catalog.errors = {}
        await self.service.refresh()
        self.assertIsNone(self.service.error)

    async def test_unexpected_exception_becomes_network_error(self) -> None:
        self.catalog.errors = {c: RuntimeError("boom") for c in ("trending", "popular", "top_rated")}
        with self.assertLogs("application.recommendation.tonight_service", level="ERROR"):
            await self.service.generate_recommendations()
        self.assertEqual(self.service.state, RecommendationState.FAILED)
        self.assertIn("boom", self.service.error.message)

    async def test_results_are_not_recomputed_on_watchlist_change(self) -> None:
        picks = await self.service.generate_recommendations()
        self.store.add(picks[0])
        self.assertEqual([m.id for m in self.service.recommendations], [m.id for m in picks])
        self.assertTrue(self.service.is_in_watchlist(picks[0]))

    async def test_ensure_loaded_fetches_once(self) -> None:
        await self.service.ensure_loaded()
        calls = self.catalog.calls
        await self.service.ensure_loaded()
        self.assertEqual(self.catalog.calls, calls)

    async def test_older_refresh_does_not_overwrite_newer(self) -> None:
        gate = asyncio.Event()
        self.catalog.gate = gate
        stale = asyncio.create_task(self.service.generate_recommendations())
        while self.catalog.calls < 3:
            await asyncio.sleep(0)

        self.catalog.gate = None
        self.catalog.pages = {"trending": _page(9), "popular": _page(), "top_rated": _page()}
        fresh = await self.service.generate_recommendations()
        self.assertEqual([m.id for m in fresh], [9])

        # The first refresh now completes with different data for a superseded generation.
        self.catalog.pages = {"trending": _page(1), "popular": _page(), "top_rated": _page()}
        gate.set()
        late = await stale
        self.assertEqual([m.id for m in late], [9])
        self.assertEqual(self.service.state, RecommendationState.READY)
        self.assertEqual([m.id for m in self.service.recommendations], [9])

    async def test_cancelled_refresh_restores_settled_state(self) -> None:
        gate = asyncio.Event()
        self.catalog.gate = gate
        task = asyncio.create_task(self.service.generate_recommendations())
        while self.catalog.calls < 3:
            await asyncio.sleep(0)
        self.assertTrue(self.service.is_loading)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(self.service.state, RecommendationState.IDLE)
        self.assertFalse(self.service.is_loading)


if __name__ == "__main__":
    unittest.main()
