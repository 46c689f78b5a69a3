"""
TMDB API HTTP client for the movie catalog.

Implements `MovieCatalogPort` on top of a lazily created aiohttp session.
Every failure is mapped onto the typed errors in `domain.catalog`; nothing
here swallows an error into an empty result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from domain.catalog import DecodeError, HTTPStatusError, InvalidRequestError, TransportError
from domain.movies import Movie, MoviePage, Video
from infrastructure.config.settings import (
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_INCLUDE_ADULT,
    TMDB_LANGUAGE,
    TMDB_REGION,
    TMDB_TIMEOUT_S,
    TMDB_TRENDING_WINDOW,
)

logger = logging.getLogger(__name__)


def parse_movie_page(data: Any, *, endpoint: str = "") -> MoviePage:
    """Turn a TMDB paged list payload into a MoviePage.

    Malformed rows are skipped; a payload without a `results` list is a
    DecodeError.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"{endpoint or 'TMDB'}: expected a JSON object, got {type(data).__name__}")
    rows = data.get("results")
    if not isinstance(rows, list):
        raise DecodeError(f"{endpoint or 'TMDB'}: response has no 'results' list")

    movies: list[Movie] = []
    skipped = 0
    for row in rows:
        try:
            movies.append(Movie.from_tmdb(row))
        except (TypeError, ValueError) as exc:
            skipped += 1
            logger.debug("skipping malformed movie row from %s: %s", endpoint, exc)
    if skipped:
        logger.warning("%s: skipped %s malformed movie rows", endpoint or "TMDB", skipped)

    def _int(key: str, default: int) -> int:
        try:
            return int(data.get(key) or default)
        except (TypeError, ValueError):
            return default

    return MoviePage(
        page=_int("page", 1),
        results=tuple(movies),
        total_pages=_int("total_pages", 0),
        total_results=_int("total_results", len(movies)),
    )


def parse_videos(data: Any, *, endpoint: str = "") -> list[Video]:
    if not isinstance(data, dict):
        raise DecodeError(f"{endpoint or 'TMDB'}: expected a JSON object, got {type(data).__name__}")
    rows = data.get("results")
    if not isinstance(rows, list):
        raise DecodeError(f"{endpoint or 'TMDB'}: response has no 'results' list")
    videos: list[Video] = []
    for row in rows:
        try:
            videos.append(Video.from_tmdb(row))
        except (TypeError, ValueError) as exc:
            logger.debug("skipping malformed video row from %s: %s", endpoint, exc)
    return videos


class TMDBClient:
    """Async HTTP client for the TMDB v3 API.

    Attributes:
        _base_url: TMDB API base URL
        _api_token: TMDB API bearer token (v4 read access token)
        _api_key: TMDB v3 api_key, used only when no bearer token is set
        _timeout_s: Request timeout in seconds
        _session: aiohttp ClientSession (lazily initialized)
        _lock: Async lock guarding session creation
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_token: str | None = None,
        api_key: str | None = None,
        timeout_s: float | None = None,
        language: str | None = None,
        region: str | None = None,
        trending_window: str | None = None,
        include_adult: bool | None = None,
    ) -> None:
        self._base_url = (base_url or TMDB_BASE_URL or "").rstrip("/")
        self._api_token = (api_token if api_token is not None else TMDB_API_TOKEN or "").strip()
        self._api_key = (api_key if api_key is not None else TMDB_API_KEY or "").strip()
        self._timeout_s = float(timeout_s or TMDB_TIMEOUT_S or 10.0)
        self._language = (language or TMDB_LANGUAGE or "en-US").strip()
        self._region = (region if region is not None else TMDB_REGION) or None
        self._trending_window = (trending_window or TMDB_TRENDING_WINDOW or "week").strip().lower()
        self._include_adult = TMDB_INCLUDE_ADULT if include_adult is None else bool(include_adult)
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and (self._api_token or self._api_key))

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        # Prefer v4 bearer token auth when available.
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _auth_params(self) -> dict[str, str]:
        """v3 auth via api_key query param (used when bearer token is absent)."""
        if self._api_token:
            return {}
        if self._api_key:
            return {"api_key": self._api_key}
        return {}

    def _list_params(self, page: int) -> dict[str, Any]:
        params: dict[str, Any] = {"language": self._language, "page": max(1, int(page))}
        if self._region:
            params["region"] = self._region
        return params

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            # Double-check after acquiring lock
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        if not self.is_configured:
            raise InvalidRequestError("TMDB client not configured (missing base_url or auth)")

        # Use direct concatenation to avoid urljoin eating the /3 path
        url = f"{self._base_url}{path}"
        query = dict(params)
        query.update(self._auth_params())
        logger.debug("TMDB GET %s params=%s", path, params)

        try:
            session = await self._get_session()
            async with session.get(url, params=query, headers=self._headers()) as resp:
                if resp.status >= 400:
                    error_text = await resp.text()
                    logger.error("TMDB %s failed (%s): %s", path, resp.status, error_text[:200])
                    raise HTTPStatusError(resp.status, f"TMDB {path} returned HTTP {resp.status}")
                return await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            logger.error("TMDB %s timeout after %ss", path, self._timeout_s)
            raise TransportError(f"TMDB {path} timed out after {self._timeout_s}s", cause=exc) from exc
        except aiohttp.ClientError as exc:
            logger.error("TMDB %s transport failure: %s", path, exc)
            raise TransportError(f"TMDB {path} request failed: {exc}", cause=exc) from exc
        except ValueError as exc:
            # resp.json() raises json.JSONDecodeError for non-JSON bodies.
            raise DecodeError(f"TMDB {path} returned invalid JSON", cause=exc) from exc

    async def fetch_trending(self, page: int = 1) -> MoviePage:
        path = f"/trending/movie/{self._trending_window}"
        data = await self._get_json(path, self._list_params(page))
        return parse_movie_page(data, endpoint=path)

    async def fetch_popular(self, page: int = 1) -> MoviePage:
        path = "/movie/popular"
        data = await self._get_json(path, self._list_params(page))
        return parse_movie_page(data, endpoint=path)

    async def fetch_top_rated(self, page: int = 1) -> MoviePage:
        path = "/movie/top_rated"
        data = await self._get_json(path, self._list_params(page))
        return parse_movie_page(data, endpoint=path)

    async def search_movies(self, query: str, page: int = 1) -> MoviePage:
        """Search movies by title.

        Raises:
            InvalidRequestError: for an empty/blank query, before any request is made.
        """
        trimmed = (query or "").strip()
        if not trimmed:
            raise InvalidRequestError("search query must not be empty")
        path = "/search/movie"
        params = self._list_params(page)
        params["query"] = trimmed
        params["include_adult"] = "true" if self._include_adult else "false"
        data = await self._get_json(path, params)
        return parse_movie_page(data, endpoint=path)

    async def fetch_videos(self, movie_id: int) -> list[Video]:
        path = f"/movie/{int(movie_id)}/videos"
        data = await self._get_json(path, {"language": self._language})
        return parse_videos(data, endpoint=path)

    async def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
