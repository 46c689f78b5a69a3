from __future__ import annotations

from typing import Protocol

from domain.movies import MoviePage, Video


class MovieCatalogPort(Protocol):
    """Read-only movie catalog.

    Every method raises `domain.catalog.NetworkError` (or a subclass) on failure.
    """

    async def fetch_trending(self, page: int = 1) -> MoviePage:
        ...

    async def fetch_popular(self, page: int = 1) -> MoviePage:
        ...

    async def fetch_top_rated(self, page: int = 1) -> MoviePage:
        ...

    async def search_movies(self, query: str, page: int = 1) -> MoviePage:
        """Empty queries raise InvalidRequestError without touching the network."""
        ...

    async def fetch_videos(self, movie_id: int) -> list[Video]:
        ...

    async def close(self) -> None:
        ...
