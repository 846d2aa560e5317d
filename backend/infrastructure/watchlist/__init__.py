from .factory import LocalStoreFactory, create_watchlist_session
from .http_remote_watchlist_service import HttpRemoteWatchlistService
from .in_memory_local_store import InMemoryLocalStore
from .json_file_local_store import JsonFileLocalStore
from .static_auth_context import StaticAuthContext

__all__ = [
    "LocalStoreFactory",
    "create_watchlist_session",
    "HttpRemoteWatchlistService",
    "InMemoryLocalStore",
    "JsonFileLocalStore",
    "StaticAuthContext",
]
