from .errors import AuthExpiredError, TransientNetworkError, WatchlistError
from .watchlist_entry import (
    POSTER_PLACEHOLDER_URL,
    TMDB_POSTER_BASE_URL,
    WatchlistEntry,
    coerce_movie_id,
    entry_to_dict,
    normalize_entries,
    normalize_entry,
    prepare_new_entry,
)
from .watchlist_state import SyncMode, WatchlistState

__all__ = [
    "AuthExpiredError",
    "TransientNetworkError",
    "WatchlistError",
    "POSTER_PLACEHOLDER_URL",
    "TMDB_POSTER_BASE_URL",
    "WatchlistEntry",
    "coerce_movie_id",
    "entry_to_dict",
    "normalize_entries",
    "normalize_entry",
    "prepare_new_entry",
    "SyncMode",
    "WatchlistState",
]
