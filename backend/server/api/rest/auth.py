from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException

import config.settings as settings


def _bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""
    if raw.lower().startswith("bearer "):
        return raw.split(" ", 1)[1].strip()
    return raw


def require_auth(authorization: Optional[str] = Header(default=None)) -> None:
    """Shared-key gate: accept "Bearer <WATCHLIST_API_KEY>"; open when no key is configured."""
    api_key = settings.WATCHLIST_API_KEY
    if not api_key:
        return
    if _bearer_token(authorization) != api_key:
        raise HTTPException(status_code=401, detail="Unauthorized")
