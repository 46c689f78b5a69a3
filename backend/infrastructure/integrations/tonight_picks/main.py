from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Optional

from application.recommendation.recommendation_engine import RecommendationEngine
from application.recommendation.tonight_service import RecommendationState, TonightService
from application.watchlist.watchlist_store import WatchlistStore
from domain.config import get_recommendation_rules
from domain.movies import Movie
from infrastructure.catalog.tmdb_client import TMDBClient
from infrastructure.persistence.watchlist.factory import create_watchlist_persistence

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description=(
            "Print tonight's picks: trending, popular and top-rated TMDB movies ranked "
            "against the saved watchlist."
        )
    )
    p.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of picks to print (default: rules limit, at most 20).",
    )
    p.add_argument("--language", default=None, help="TMDB language for list pages (default TMDB_LANGUAGE).")
    p.add_argument(
        "--watchlist-path",
        default=None,
        help="Read the watchlist from this JSON file instead of WATCHLIST_PATH.",
    )
    p.add_argument("--json", action="store_true", help="Emit picks as a JSON array.")
    return p


def _format_pick(rank: int, movie: Movie) -> str:
    year = movie.release_year
    label = f"{movie.title} ({year})" if year else movie.title
    return f"{rank:>2}. {label}  {movie.formatted_rating}/10  [{movie.vote_count} votes]"


async def _run(
    *,
    limit: Optional[int],
    language: Optional[str],
    watchlist_path: Optional[str],
    as_json: bool,
) -> int:
    persistence = create_watchlist_persistence("json" if watchlist_path else None, path=watchlist_path)
    store = WatchlistStore(persistence=persistence)
    client = TMDBClient(language=language)
    engine = RecommendationEngine(rules=get_recommendation_rules())
    service = TonightService(catalog=client, store=store, engine=engine)
    try:
        picks = await service.generate_recommendations()
    finally:
        await client.close()

    if service.state is RecommendationState.FAILED:
        error = service.error
        logger.error("tonight's picks unavailable: %s", error)
        print(error.user_message if error is not None else "No picks available.")
        return 1

    if limit is not None:
        picks = picks[: max(0, int(limit))]

    if as_json:
        print(json.dumps([m.to_dict() for m in picks], ensure_ascii=False, indent=2))
    elif not picks:
        print("No picks tonight.")
    else:
        for rank, movie in enumerate(picks, 1):
            print(_format_pick(rank, movie))
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = _build_parser().parse_args()
    raise SystemExit(
        asyncio.run(
            _run(
                limit=args.limit,
                language=args.language,
                watchlist_path=args.watchlist_path,
                as_json=bool(args.json),
            )
        )
    )


if __name__ == "__main__":
    main()
