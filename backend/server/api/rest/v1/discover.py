from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Depends

from application.discover.discover_service import DiscoverService
from domain.movies import Movie
from server.api.rest.dependencies import get_discover_service
from server.api.rest.errors import catalog_http_error
from server.models.schemas import DiscoverResponse, ErrorOut, MovieOut

router = APIRouter(prefix="/api/v1", tags=["discover-v1"])


def _movies(service: DiscoverService, movies: Iterable[Movie]) -> list[MovieOut]:
    return [MovieOut.from_domain(m, in_watchlist=service.is_in_watchlist(m)) for m in movies]


def _render(service: DiscoverService) -> DiscoverResponse:
    snap = service.snapshot()
    return DiscoverResponse(
        is_loading=snap.is_loading,
        trending=_movies(service, snap.trending),
        popular=_movies(service, snap.popular),
        top_rated=_movies(service, snap.top_rated),
        error=ErrorOut.from_error(snap.error),
    )


@router.get("/discover", response_model=DiscoverResponse)
async def get_discover(service: DiscoverService = Depends(get_discover_service)) -> DiscoverResponse:
    snap = service.snapshot()
    if not (snap.trending or snap.popular or snap.top_rated) and not snap.is_loading:
        await service.load_content()
    return _render(service)


@router.post("/discover/refresh", response_model=DiscoverResponse)
async def refresh_discover(service: DiscoverService = Depends(get_discover_service)) -> DiscoverResponse:
    await service.load_content()
    if service.error is not None:
        raise catalog_http_error(service.error)
    return _render(service)
