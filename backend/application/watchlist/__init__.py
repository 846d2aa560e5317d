from .commands import AddEntryCommand, RemoveEntryCommand
from .pending_add_stash import PendingAddStash
from .session import WatchlistSession
from .watchlist_store import WatchlistStore

__all__ = [
    "AddEntryCommand",
    "RemoveEntryCommand",
    "PendingAddStash",
    "WatchlistSession",
    "WatchlistStore",
]
