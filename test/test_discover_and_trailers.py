import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.discover.discover_service import DiscoverService
from application.trailers.trailer_service import TrailerService
from application.watchlist.watchlist_store import WatchlistStore
from domain.catalog import DecodeError, HTTPStatusError, TransportError
from domain.movies import Movie, MoviePage, Video
from infrastructure.persistence.watchlist.json_watchlist_store import NullWatchlistPersistence


def _page(*ids: int) -> MoviePage:
    return MoviePage(page=1, results=tuple(Movie(id=i, title=f"Movie {i}") for i in ids))


class _StubCatalog:
    def __init__(self) -> None:
        self.pages = {"trending": _page(1, 2), "popular": _page(3), "top_rated": _page(4, 5)}
        self.errors: dict[str, Exception] = {}
        self.videos: list[Video] = []
        self.video_error: Exception | None = None

    async def _get(self, category: str) -> MoviePage:
        if category in self.errors:
            raise self.errors[category]
        return self.pages[category]

    async def fetch_trending(self, page: int = 1) -> MoviePage:
        return await self._get("trending")

    async def fetch_popular(self, page: int = 1) -> MoviePage:
        return await self._get("popular")

    async def fetch_top_rated(self, page: int = 1) -> MoviePage:
        return await self._get("top_rated")

    async def fetch_videos(self, movie_id: int) -> list[Video]:
        if self.video_error is not None:
            raise self.video_error
        return list(self.videos)


class TestDiscoverService(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.catalog = _StubCatalog()
        self.store = WatchlistStore(persistence=NullWatchlistPersistence())
        self.service = DiscoverService(catalog=self.catalog, store=self.store)

    async def test_loads_all_categories(self) -> None:
        loading: list[bool] = []
        self.service.subscribe(lambda snap: loading.append(snap.is_loading))
        await self.service.load_content()
        self.assertEqual([m.id for m in self.service.trending_movies], [1, 2])
        self.assertEqual([m.id for m in self.service.popular_movies], [3])
        self.assertEqual([m.id for m in self.service.top_rated_movies], [4, 5])
        self.assertIsNone(self.service.error)
        self.assertEqual(loading, [True, False])

    async def test_failed_category_keeps_previous_list(self) -> None:
        await self.service.load_content()
        self.catalog.errors["popular"] = TransportError("offline")
        self.catalog.pages["trending"] = _page(9)
        await self.service.load_content()
        self.assertEqual([m.id for m in self.service.trending_movies], [9])
        self.assertEqual([m.id for m in self.service.popular_movies], [3])
        self.assertIsNone(self.service.error)

    async def test_error_only_when_every_category_fails(self) -> None:
        first = HTTPStatusError(500)
        self.catalog.errors = {"trending": first, "popular": DecodeError(), "top_rated": TransportError()}
        snap = await self.service.load_content()
        self.assertIs(snap.error, first)
        self.assertFalse(snap.is_loading)

        self.catalog.errors = {}
        snap = await self.service.load_content()
        self.assertIsNone(snap.error)

    async def test_watchlist_toggle(self) -> None:
        await self.service.load_content()
        movie = self.service.trending_movies[0]
        self.assertFalse(self.service.is_in_watchlist(movie))
        self.service.toggle_watchlist(movie)
        self.assertTrue(self.store.contains(movie))


class TestTrailerService(unittest.IsolatedAsyncioTestCase):
    async def test_returns_playable_trailers(self) -> None:
        catalog = _StubCatalog()
        catalog.videos = [
            Video(id="1", key="teaser", site="YouTube", type="Teaser"),
            Video(id="2", key="trailer", site="YouTube", type="Trailer", official=True),
        ]
        trailers = await TrailerService(catalog=catalog).load_trailers(42)
        self.assertEqual([v.key for v in trailers], ["trailer"])

    async def test_failure_yields_empty_list(self) -> None:
        catalog = _StubCatalog()
        catalog.video_error = HTTPStatusError(404)
        with self.assertLogs("application.trailers.trailer_service", level="WARNING"):
            trailers = await TrailerService(catalog=catalog).load_trailers(42)
        self.assertEqual(trailers, [])


if __name__ == "__main__":
    unittest.main()
