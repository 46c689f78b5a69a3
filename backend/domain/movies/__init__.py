from domain.movies.movie import TMDB_IMAGE_BASE_URL, Movie, MoviePage
from domain.movies.sort_option import SortOption
from domain.movies.video import Video, select_trailers
from domain.movies.watchlist_item import WatchlistItem

__all__ = [
    "Movie",
    "MoviePage",
    "SortOption",
    "TMDB_IMAGE_BASE_URL",
    "Video",
    "WatchlistItem",
    "select_trailers",
]
