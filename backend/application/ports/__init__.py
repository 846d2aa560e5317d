from .auth_context_port import AuthContextPort
from .local_watchlist_port import LocalDurableStorePort
from .remote_watchlist_port import RemoteWatchlistServicePort
from .watchlist_repository_port import WatchlistRepositoryPort

__all__ = [
    "AuthContextPort",
    "LocalDurableStorePort",
    "RemoteWatchlistServicePort",
    "WatchlistRepositoryPort",
]
