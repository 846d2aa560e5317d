from __future__ import annotations

from typing import Optional


class StaticAuthContext:
    """Mutable session snapshot: who is signed in and with which token."""

    def __init__(self, *, user_id: Optional[str] = None, token: Optional[str] = None) -> None:
        self._user_id = str(user_id) if user_id else None
        self._token = token or None

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def token(self) -> Optional[str]:
        return self._token

    def login(self, user_id: str, token: Optional[str] = None) -> None:
        self._user_id = str(user_id)
        self._token = token or None

    def logout(self) -> None:
        self._user_id = None
        self._token = None
