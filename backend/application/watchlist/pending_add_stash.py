from __future__ import annotations

import logging
from typing import Any, Optional

from application.ports.auth_context_port import AuthContextPort
from application.ports.local_watchlist_port import LocalDurableStorePort
from application.watchlist.watchlist_store import WatchlistStore
from domain.watchlist import WatchlistEntry, entry_to_dict, normalize_entry

logger = logging.getLogger(__name__)

PENDING_ITEM_KEY = "pendingWatchlistItem"
RETURN_URL_KEY = "returnUrl"


class PendingAddStash:
    """Remembers a movie a signed-out user wanted to save, until they log in.

    The watchlist store itself knows nothing about logins; this stash lives
    next to it in local storage and is replayed once authentication completes.
    """

    def __init__(self, *, local: LocalDurableStorePort) -> None:
        self._local = local

    def stash(self, entry: Any, *, return_url: Optional[str] = None) -> WatchlistEntry:
        normalized = normalize_entry(entry)
        self._local.set_value(PENDING_ITEM_KEY, entry_to_dict(normalized))
        if return_url:
            self._local.set_value(RETURN_URL_KEY, return_url)
        return normalized

    def peek(self) -> Optional[WatchlistEntry]:
        raw = self._local.get_value(PENDING_ITEM_KEY)
        if raw is None:
            return None
        try:
            return normalize_entry(raw)
        except ValueError:
            logger.warning("Discarding unreadable pending watchlist item")
            self.clear()
            return None

    def clear(self) -> None:
        self._local.delete_value(PENDING_ITEM_KEY)
        self._local.delete_value(RETURN_URL_KEY)

    async def replay(self, store: WatchlistStore, auth: AuthContextPort) -> Optional[str]:
        """Add the stashed movie for the signed-in user; returns the saved return url."""
        if not auth.is_authenticated or not auth.user_id:
            return None
        entry = self.peek()
        if entry is None:
            return None
        return_url = self._local.get_value(RETURN_URL_KEY)
        self.clear()
        task = store.add(auth.user_id, entry)
        if task is not None:
            await task
        return str(return_url) if return_url else None
