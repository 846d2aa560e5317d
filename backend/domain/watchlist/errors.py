from __future__ import annotations

from typing import Optional


class WatchlistError(Exception):
    """Base error for watchlist synchronization."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TransientNetworkError(WatchlistError):
    """A call to the remote watchlist service failed; retrying may succeed."""


class AuthExpiredError(TransientNetworkError):
    """The remote service rejected the credentials (HTTP 401)."""

    def __init__(self, message: str = "Authentication expired") -> None:
        super().__init__(message, status_code=401)
