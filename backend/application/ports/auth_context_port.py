from __future__ import annotations

from typing import Optional, Protocol


class AuthContextPort(Protocol):
    """Read-only view of the current session, polled at call time."""

    @property
    def is_authenticated(self) -> bool:
        ...

    @property
    def user_id(self) -> Optional[str]:
        ...
