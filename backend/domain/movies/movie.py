from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


@dataclass(frozen=True, eq=False)
class Movie:
    """A catalog entry as returned by TMDB list/search endpoints.

    Identity is the TMDB id: two records with the same id are the same movie,
    even when display fields differ between fetches.
    """

    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: tuple[int, ...] = field(default_factory=tuple)
    adult: bool = False
    video: bool = False
    original_language: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def release_year(self) -> Optional[int]:
        raw = (self.release_date or "").strip()
        if len(raw) < 4 or not raw[:4].isdigit():
            return None
        return int(raw[:4])

    @property
    def formatted_rating(self) -> str:
        return f"{self.vote_average:.1f}"

    def poster_url(self, size: str = "w500") -> Optional[str]:
        if not self.poster_path:
            return None
        return f"{TMDB_IMAGE_BASE_URL}/{size}{self.poster_path}"

    def backdrop_url(self, size: str = "w780") -> Optional[str]:
        if not self.backdrop_path:
            return None
        return f"{TMDB_IMAGE_BASE_URL}/{size}{self.backdrop_path}"

    @classmethod
    def from_tmdb(cls, payload: dict[str, Any]) -> "Movie":
        """Build a Movie from a TMDB result object.

        Raises:
            ValueError: when the payload has no usable id or its genre_ids is not a list.
        """
        if not isinstance(payload, dict):
            raise ValueError("movie payload must be an object")
        movie_id = payload.get("id")
        if movie_id is None or isinstance(movie_id, bool):
            raise ValueError("movie payload is missing 'id'")
        try:
            movie_id = int(movie_id)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"movie id is not an integer: {movie_id!r}") from exc

        raw_genres = payload.get("genre_ids")
        if raw_genres is None and isinstance(payload.get("genres"), list):
            # Detail payloads carry [{"id": 18, "name": "Drama"}] instead of ids.
            raw_genres = [g.get("id") for g in payload["genres"] if isinstance(g, dict)]
        if raw_genres is not None and not isinstance(raw_genres, (list, tuple)):
            raise ValueError(f"movie genre_ids is not a list: {raw_genres!r}")
        genre_ids = tuple(_as_int(g) for g in (raw_genres or []) if g is not None)

        title = str(payload.get("title") or payload.get("original_title") or "").strip()
        return cls(
            id=movie_id,
            title=title,
            original_title=str(payload.get("original_title") or title).strip(),
            overview=str(payload.get("overview") or "").strip(),
            poster_path=_as_optional_str(payload.get("poster_path")),
            backdrop_path=_as_optional_str(payload.get("backdrop_path")),
            release_date=str(payload.get("release_date") or "").strip(),
            vote_average=max(0.0, _as_float(payload.get("vote_average"))),
            vote_count=max(0, _as_int(payload.get("vote_count"))),
            popularity=max(0.0, _as_float(payload.get("popularity"))),
            genre_ids=genre_ids,
            adult=bool(payload.get("adult", False)),
            video=bool(payload.get("video", False)),
            original_language=str(payload.get("original_language") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "original_title": self.original_title,
            "overview": self.overview,
            "poster_path": self.poster_path,
            "backdrop_path": self.backdrop_path,
            "release_date": self.release_date,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
            "popularity": self.popularity,
            "genre_ids": list(self.genre_ids),
            "adult": self.adult,
            "video": self.video,
            "original_language": self.original_language,
        }


@dataclass(frozen=True)
class MoviePage:
    page: int
    results: tuple[Movie, ...] = field(default_factory=tuple)
    total_pages: int = 0
    total_results: int = 0
