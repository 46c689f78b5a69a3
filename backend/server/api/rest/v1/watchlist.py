from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from application.watchlist.watchlist_store import WatchlistStore
from application.watchlist.watchlist_view import WatchlistView
from domain.movies import SortOption
from server.api.rest.dependencies import get_watchlist_store, get_watchlist_view
from server.models.schemas import (
    MoviePayload,
    WatchlistItemOut,
    WatchlistResponse,
    WatchlistShareResponse,
    WatchlistToggleResponse,
)

router = APIRouter(prefix="/api/v1", tags=["watchlist-v1"])

# Store calls write the watchlist file under a lock; plain `def` handlers run in
# the threadpool so that write never blocks the event loop.


@router.get("/watchlist", response_model=WatchlistResponse)
def list_watchlist(
    sort: Optional[SortOption] = Query(default=None, description="date_added (default), title or rating"),
    view: WatchlistView = Depends(get_watchlist_view),
) -> WatchlistResponse:
    # The chosen order sticks, like the sort picker on the watchlist screen.
    if sort is not None:
        view.sort_option = sort
    items = view.items
    return WatchlistResponse(
        sort=view.sort_option,
        count=len(items),
        items=[WatchlistItemOut.from_domain(i) for i in items],
    )


@router.post("/watchlist", response_model=WatchlistItemOut, status_code=201)
def add_to_watchlist(
    movie: MoviePayload,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> WatchlistItemOut:
    item = store.add(movie.to_domain())
    return WatchlistItemOut.from_domain(item)


@router.post("/watchlist/toggle", response_model=WatchlistToggleResponse)
def toggle_watchlist(
    movie: MoviePayload,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> WatchlistToggleResponse:
    present = store.toggle(movie.to_domain())
    return WatchlistToggleResponse(movie_id=movie.id, in_watchlist=present)


@router.get("/watchlist/share", response_model=WatchlistShareResponse)
def share_watchlist(view: WatchlistView = Depends(get_watchlist_view)) -> WatchlistShareResponse:
    return WatchlistShareResponse(text=view.share_text())


@router.delete("/watchlist/{movie_id}", status_code=204, response_class=Response)
def remove_from_watchlist(
    movie_id: int,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Response:
    if not store.remove_id(movie_id):
        raise HTTPException(status_code=404, detail="movie not in watchlist")
    return Response(status_code=204)


@router.delete("/watchlist", status_code=204, response_class=Response)
def clear_watchlist(store: WatchlistStore = Depends(get_watchlist_store)) -> Response:
    store.clear_all()
    return Response(status_code=204)
