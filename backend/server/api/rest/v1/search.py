from __future__ import annotations

from fastapi import APIRouter, Depends

from application.search.search_coordinator import SearchCoordinator, SearchState
from server.api.rest.dependencies import get_search_coordinator
from server.api.rest.errors import catalog_http_error
from server.models.schemas import ErrorOut, MovieOut, SearchQueryRequest, SearchResponse

router = APIRouter(prefix="/api/v1", tags=["search-v1"])


def _render(coordinator: SearchCoordinator) -> SearchResponse:
    snap = coordinator.snapshot()
    return SearchResponse(
        query=snap.query,
        state=snap.state.value,
        is_searching=snap.is_searching,
        results=[MovieOut.from_domain(m, in_watchlist=coordinator.is_in_watchlist(m)) for m in snap.results],
        error=ErrorOut.from_error(snap.error),
    )


@router.put("/search/query", response_model=SearchResponse)
async def set_search_query(
    request: SearchQueryRequest,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> SearchResponse:
    """Record a keystroke-level query edit; the search itself runs after the debounce."""
    coordinator.set_query(request.query)
    return _render(coordinator)


@router.post("/search/retry", response_model=SearchResponse)
async def retry_search(coordinator: SearchCoordinator = Depends(get_search_coordinator)) -> SearchResponse:
    await coordinator.search()
    if coordinator.state is SearchState.FAILED:
        raise catalog_http_error(coordinator.error)
    return _render(coordinator)


@router.get("/search", response_model=SearchResponse)
async def get_search(coordinator: SearchCoordinator = Depends(get_search_coordinator)) -> SearchResponse:
    return _render(coordinator)


@router.delete("/search", response_model=SearchResponse)
async def clear_search(coordinator: SearchCoordinator = Depends(get_search_coordinator)) -> SearchResponse:
    coordinator.clear_search()
    return _render(coordinator)
