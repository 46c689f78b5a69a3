from __future__ import annotations

import logging

from application.ports.movie_catalog_port import MovieCatalogPort
from domain.catalog import NetworkError
from domain.movies import Video, select_trailers

logger = logging.getLogger(__name__)


class TrailerService:
    def __init__(self, *, catalog: MovieCatalogPort) -> None:
        self._catalog = catalog

    async def load_trailers(self, movie_id: int) -> list[Video]:
        """Playable trailers for a movie; an empty list when none can be loaded."""
        try:
            videos = await self._catalog.fetch_videos(int(movie_id))
        except NetworkError as exc:
            # Trailers are optional decoration on the detail screen.
            logger.warning("trailers unavailable for movie_id=%s: %s", movie_id, exc)
            return []
        trailers = select_trailers(videos)
        logger.debug("movie_id=%s: %s videos, %s trailers", movie_id, len(videos), len(trailers))
        return trailers
