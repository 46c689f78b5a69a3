"""Tonight recommendation ranking.

Pure functions over catalog pages and a watchlist snapshot; no I/O. The
stateful fetch/refresh side lives in `tonight_service`.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from domain.config import RecommendationRules, get_recommendation_rules
from domain.movies import Movie, WatchlistItem


@dataclass(frozen=True)
class TasteProfile:
    """Genre and language signals derived from the watchlist."""

    genre_shares: dict[int, float]
    languages: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.genre_shares and not self.languages

    @classmethod
    def from_watchlist(cls, items: Sequence[WatchlistItem]) -> "TasteProfile":
        if not items:
            return cls(genre_shares={}, languages=frozenset())
        counts: Counter[int] = Counter()
        for item in items:
            counts.update(set(item.movie.genre_ids))
        total = float(len(items))
        return cls(
            genre_shares={g: n / total for g, n in counts.items()},
            languages=frozenset(i.movie.original_language for i in items if i.movie.original_language),
        )

    def genre_affinity(self, movie: Movie) -> float:
        if not self.genre_shares:
            return 0.0
        return min(1.0, sum(self.genre_shares.get(g, 0.0) for g in set(movie.genre_ids)))

    def language_match(self, movie: Movie) -> bool:
        return bool(movie.original_language) and movie.original_language in self.languages


def pool_candidates(*pages: Iterable[Movie]) -> list[Movie]:
    """Merge pages in precedence order; the first copy of an id wins."""
    seen: set[int] = set()
    pooled: list[Movie] = []
    for page in pages:
        for movie in page:
            if movie.id in seen:
                continue
            seen.add(movie.id)
            pooled.append(movie)
    return pooled


def is_eligible(movie: Movie, rules: RecommendationRules) -> bool:
    if rules.exclude_adult and movie.adult:
        return False
    if movie.vote_average < 0 or movie.vote_average < rules.min_vote_average:
        return False
    return movie.vote_count >= rules.min_vote_count


def base_score(movie: Movie, rules: RecommendationRules) -> float:
    return movie.vote_average * math.log(movie.vote_count + 1) + rules.popularity_weight * math.log(
        movie.popularity + 1
    )


def score_movie(movie: Movie, profile: TasteProfile, rules: RecommendationRules) -> float:
    multiplier = 1.0
    if not profile.is_empty:
        multiplier += rules.genre_weight * profile.genre_affinity(movie)
        if profile.language_match(movie):
            multiplier += rules.language_weight
    return base_score(movie, rules) * multiplier


class RecommendationEngine:
    def __init__(self, *, rules: Optional[RecommendationRules] = None) -> None:
        self._rules = rules or get_recommendation_rules()

    @property
    def rules(self) -> RecommendationRules:
        return self._rules

    def generate(
        self,
        *,
        watchlist: Sequence[WatchlistItem],
        trending: Iterable[Movie] = (),
        popular: Iterable[Movie] = (),
        top_rated: Iterable[Movie] = (),
        limit: Optional[int] = None,
    ) -> list[Movie]:
        """Rank catalog candidates for tonight.

        Watchlisted ids never appear in the result, and the result has at most
        `limit` entries (capped by the rules limit). Ties are broken by
        ascending id so equal inputs always produce the same list.
        """
        watched_ids = {item.id for item in watchlist}
        profile = TasteProfile.from_watchlist(watchlist)
        cap = self._rules.limit if limit is None else max(0, min(int(limit), self._rules.limit))

        scored: list[tuple[float, Movie]] = []
        for movie in pool_candidates(trending, popular, top_rated):
            if movie.id in watched_ids or not is_eligible(movie, self._rules):
                continue
            scored.append((score_movie(movie, profile, self._rules), movie))

        scored.sort(key=lambda pair: (-pair[0], pair[1].id))
        return [movie for _, movie in scored[:cap]]
