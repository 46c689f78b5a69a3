from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache

from application.discover.discover_service import DiscoverService
from application.recommendation.recommendation_engine import RecommendationEngine
from application.recommendation.tonight_service import TonightService
from application.search.search_coordinator import SearchCoordinator
from application.trailers.trailer_service import TrailerService
from application.watchlist.watchlist_store import WatchlistStore
from application.watchlist.watchlist_view import WatchlistView
from config.settings import RECOMMENDATION_LIMIT, SEARCH_DEBOUNCE_S, SEARCH_MIN_QUERY_CHARS
from domain.config import get_recommendation_rules

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _build_catalog():
    from infrastructure.catalog.tmdb_client import TMDBClient

    client = TMDBClient()
    if not client.is_configured:
        logger.warning("TMDB_API_TOKEN / TMDB_API_KEY not set; catalog requests will fail")
    return client


@lru_cache(maxsize=1)
def _build_watchlist_store() -> WatchlistStore:
    from infrastructure.persistence.watchlist.factory import WatchlistPersistenceFactory

    return WatchlistStore(persistence=WatchlistPersistenceFactory.create())


@lru_cache(maxsize=1)
def _build_watchlist_view() -> WatchlistView:
    return WatchlistView(store=_build_watchlist_store())


@lru_cache(maxsize=1)
def _build_tonight_service() -> TonightService:
    rules = get_recommendation_rules()
    if RECOMMENDATION_LIMIT < rules.limit:
        rules = replace(rules, limit=max(1, RECOMMENDATION_LIMIT))
    return TonightService(
        catalog=_build_catalog(),
        store=_build_watchlist_store(),
        engine=RecommendationEngine(rules=rules),
    )


@lru_cache(maxsize=1)
def _build_search_coordinator() -> SearchCoordinator:
    return SearchCoordinator(
        catalog=_build_catalog(),
        store=_build_watchlist_store(),
        debounce_s=SEARCH_DEBOUNCE_S,
        min_query_chars=SEARCH_MIN_QUERY_CHARS,
    )


@lru_cache(maxsize=1)
def _build_discover_service() -> DiscoverService:
    return DiscoverService(catalog=_build_catalog(), store=_build_watchlist_store())


@lru_cache(maxsize=1)
def _build_trailer_service() -> TrailerService:
    return TrailerService(catalog=_build_catalog())


def get_watchlist_store() -> WatchlistStore:
    return _build_watchlist_store()


def get_watchlist_view() -> WatchlistView:
    return _build_watchlist_view()


def get_tonight_service() -> TonightService:
    return _build_tonight_service()


def get_search_coordinator() -> SearchCoordinator:
    return _build_search_coordinator()


def get_discover_service() -> DiscoverService:
    return _build_discover_service()


def get_trailer_service() -> TrailerService:
    return _build_trailer_service()


async def shutdown_dependencies() -> None:
    """Cancel pending searches and close the catalog session, if they were ever built."""
    if _build_search_coordinator.cache_info().currsize:
        await _build_search_coordinator().close()
    if _build_catalog.cache_info().currsize:
        await _build_catalog().close()
