from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.watchlist as watchlist_v1

api_router = APIRouter()
api_router.include_router(watchlist_v1.router)

__all__ = ["api_router"]
