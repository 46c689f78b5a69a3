import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from domain.catalog import TransportError
from domain.movies import Movie, MoviePage
from infrastructure.integrations.tonight_picks import main as cli


def _page(*ids: int) -> MoviePage:
    return MoviePage(
        page=1,
        results=tuple(
            Movie(id=i, title=f"Movie {i}", release_date="2001-01-01", vote_average=7.0, vote_count=100)
            for i in ids
        ),
    )


class _StubCatalog:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.closed = False

    async def _list(self, *ids: int) -> MoviePage:
        if self.fail:
            raise TransportError("offline")
        return _page(*ids)

    async def fetch_trending(self, page: int = 1) -> MoviePage:
        return await self._list(1, 2)

    async def fetch_popular(self, page: int = 1) -> MoviePage:
        return await self._list(3)

    async def fetch_top_rated(self, page: int = 1) -> MoviePage:
        return await self._list(4)

    async def close(self) -> None:
        self.closed = True


class TestTonightPicksCli(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.watchlist_path = Path(self._tmp.name) / "watchlist.json"
        saved = {
            "version": 1,
            "items": [{"movie": {"id": 2, "title": "Saved"}, "date_added": "2024-01-01T00:00:00+00:00"}],
        }
        self.watchlist_path.write_text(json.dumps(saved), encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def _run(self, catalog: _StubCatalog, **kwargs) -> tuple[int, str]:
        out = io.StringIO()
        with mock.patch.object(cli, "TMDBClient", return_value=catalog), contextlib.redirect_stdout(out):
            code = await cli._run(
                limit=kwargs.get("limit"),
                language=None,
                watchlist_path=str(self.watchlist_path),
                as_json=kwargs.get("as_json", False),
            )
        return code, out.getvalue()

    async def test_prints_ranked_picks_without_watchlisted_movies(self) -> None:
        catalog = _StubCatalog()
        code, out = await self._run(catalog, limit=2)
        self.assertEqual(code, 0)
        # Ranks are right-aligned, so keep the leading pad of the first line.
        lines = out.rstrip().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith(" 1. Movie "))
        self.assertNotIn("Movie 2 ", out)
        self.assertTrue(catalog.closed)

    async def test_json_output(self) -> None:
        code, out = await self._run(_StubCatalog(), as_json=True)
        self.assertEqual(code, 0)
        self.assertEqual(sorted(m["id"] for m in json.loads(out)), [1, 3, 4])

    async def test_failure_exits_non_zero(self) -> None:
        with self.assertLogs("infrastructure.integrations.tonight_picks.main", level="ERROR"):
            code, out = await self._run(_StubCatalog(fail=True))
        self.assertEqual(code, 1)
        self.assertIn("Could not reach the movie service", out)

    def test_parser_defaults(self) -> None:
        args = cli._build_parser().parse_args([])
        self.assertIsNone(args.limit)
        self.assertFalse(args.json)


if __name__ == "__main__":
    unittest.main()
