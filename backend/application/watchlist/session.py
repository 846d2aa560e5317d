from __future__ import annotations

import logging
from typing import Any, Optional

from application.watchlist.pending_add_stash import PendingAddStash
from application.watchlist.watchlist_store import WatchlistStore
from domain.watchlist import normalize_entry

logger = logging.getLogger(__name__)


class WatchlistSession:
    """Entry point for UI callers: wires the store, the auth context and the pending-add stash."""

    def __init__(
        self,
        *,
        store: WatchlistStore,
        auth: Any,
        stash: PendingAddStash,
        require_login_for_add: bool = True,
    ) -> None:
        # `auth` must also expose login()/logout() (see StaticAuthContext).
        self.store = store
        self.auth = auth
        self.stash = stash
        self.require_login_for_add = require_login_for_add

    def request_add(self, entry: Any, *, return_url: Optional[str] = None) -> bool:
        """Add ``entry``; False means it was stashed and the caller should send the user to login.

        Raises:
            ValueError: If ``entry`` carries no movie id.
        """
        if self.auth.is_authenticated:
            self.store.add(self.auth.user_id, entry)
            return True
        if self.require_login_for_add:
            self.stash.stash(entry, return_url=return_url)
            return False
        self.store.add(None, entry)
        return True

    def toggle(self, entry: Any, *, return_url: Optional[str] = None) -> bool:
        """Remove ``entry`` when listed, otherwise ``request_add`` it (same ValueError contract)."""
        movie_id = normalize_entry(entry).movie_id
        if self.store.contains(movie_id):
            self.store.remove(self.auth.user_id, movie_id)
            return True
        return self.request_add(entry, return_url=return_url)

    async def on_login(self, user_id: str, token: Optional[str] = None) -> Optional[str]:
        """Sign in, sync the list (a different user replaces the previous one), replay the stash."""
        self.auth.login(user_id, token)
        await self.store.ensure_synced()
        return await self.stash.replay(self.store, self.auth)

    def on_logout(self) -> None:
        logger.info("Clearing watchlist for signed-out user")
        self.auth.logout()
        self.store.reset()

    async def close(self) -> None:
        await self.store.close()
