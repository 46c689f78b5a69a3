from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.catalog import NetworkError
from domain.movies import Movie, SortOption, Video, WatchlistItem


class MoviePayload(BaseModel):
    """Movie record sent by a client (same field names as TMDB list results)."""
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
    genre_ids: List[int] = Field(default_factory=list)
    adult: bool = False
    video: bool = False
    original_language: str = ""

    def to_domain(self) -> Movie:
        return Movie.from_tmdb(self.model_dump())


class MovieOut(MoviePayload):
    release_year: Optional[int] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    in_watchlist: bool = False

    @classmethod
    def from_domain(cls, movie: Movie, *, in_watchlist: bool = False) -> "MovieOut":
        return cls(
            **movie.to_dict(),
            release_year=movie.release_year,
            poster_url=movie.poster_url(),
            backdrop_url=movie.backdrop_url(),
            in_watchlist=in_watchlist,
        )


class ErrorOut(BaseModel):
    """Typed catalog failure with a retry hint for the UI."""
    type: str
    message: str
    user_message: str
    retryable: bool
    status_code: Optional[int] = None

    @classmethod
    def from_error(cls, error: Optional[NetworkError]) -> Optional["ErrorOut"]:
        if error is None:
            return None
        return cls(**error.to_dict())


class WatchlistItemOut(BaseModel):
    movie: MovieOut
    date_added: datetime

    @classmethod
    def from_domain(cls, item: WatchlistItem) -> "WatchlistItemOut":
        return cls(movie=MovieOut.from_domain(item.movie, in_watchlist=True), date_added=item.date_added)


class WatchlistResponse(BaseModel):
    sort: SortOption
    count: int
    items: List[WatchlistItemOut]


class WatchlistToggleResponse(BaseModel):
    movie_id: int
    in_watchlist: bool


class WatchlistShareResponse(BaseModel):
    text: str


class TonightResponse(BaseModel):
    state: str
    is_loading: bool
    recommendations: List[MovieOut]
    error: Optional[ErrorOut] = None
    generated_at: Optional[datetime] = None


class SearchQueryRequest(BaseModel):
    query: str = Field("", description="Current text of the search field")


class SearchResponse(BaseModel):
    query: str
    state: str
    is_searching: bool
    results: List[MovieOut]
    error: Optional[ErrorOut] = None


class DiscoverResponse(BaseModel):
    is_loading: bool
    trending: List[MovieOut]
    popular: List[MovieOut]
    top_rated: List[MovieOut]
    error: Optional[ErrorOut] = None


class VideoOut(BaseModel):
    id: str
    key: str
    name: str
    site: str
    type: str
    official: bool
    published_at: str
    youtube_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_domain(cls, video: Video) -> "VideoOut":
        return cls(**video.to_dict())


class TrailersResponse(BaseModel):
    movie_id: int
    trailers: List[VideoOut]
