from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.discover as discover_v1
import server.api.rest.v1.movies as movies_v1
import server.api.rest.v1.search as search_v1
import server.api.rest.v1.tonight as tonight_v1
import server.api.rest.v1.watchlist as watchlist_v1

# Canonical API router aggregator (v1 only).
api_router = APIRouter()
api_router.include_router(watchlist_v1.router)
api_router.include_router(tonight_v1.router)
api_router.include_router(search_v1.router)
api_router.include_router(discover_v1.router)
api_router.include_router(movies_v1.router)

__all__ = ["api_router"]
