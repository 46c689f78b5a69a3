from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from domain.movies.movie import Movie


@dataclass(frozen=True)
class WatchlistItem:
    """A movie the user wants to watch later.

    `date_added` is set once when the movie enters the watchlist and is never
    rewritten, even if the movie is added again.
    """

    movie: Movie
    date_added: datetime

    @property
    def id(self) -> int:
        return self.movie.id

    @property
    def title(self) -> str:
        return self.movie.title

    @property
    def vote_average(self) -> float:
        return self.movie.vote_average

    @property
    def vote_count(self) -> int:
        return self.movie.vote_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "movie": self.movie.to_dict(),
            "date_added": self.date_added.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchlistItem":
        if not isinstance(data, dict):
            raise ValueError("watchlist item must be an object")
        movie = Movie.from_tmdb(data.get("movie") or {})
        raw_date = data.get("date_added")
        if not raw_date:
            raise ValueError(f"watchlist item {movie.id} has no date_added")
        date_added = datetime.fromisoformat(str(raw_date))
        if date_added.tzinfo is None:
            date_added = date_added.replace(tzinfo=timezone.utc)
        return cls(movie=movie, date_added=date_added)
