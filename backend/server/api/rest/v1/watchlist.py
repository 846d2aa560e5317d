from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from application.ports.watchlist_repository_port import WatchlistRepositoryPort
from domain.watchlist import WatchlistEntry, entry_to_dict, prepare_new_entry
from server.api.rest.auth import require_auth
from server.api.rest.dependencies import get_watchlist_repository
from server.models.schemas import WatchlistEntryRequest, WatchlistResponse

router = APIRouter(prefix="/api", tags=["watchlist"], dependencies=[Depends(require_auth)])


def _payload(entries: List[WatchlistEntry]) -> Dict[str, Any]:
    return {"watchlist": [entry_to_dict(e) for e in entries]}


@router.get("/users/{user_id}/watchlist", response_model=WatchlistResponse)
async def get_watchlist(
    user_id: str,
    repo: WatchlistRepositoryPort = Depends(get_watchlist_repository),
) -> Dict[str, Any]:
    return _payload(await repo.list_entries(user_id=user_id))


@router.post("/users/{user_id}/watchlist", response_model=WatchlistResponse)
async def add_to_watchlist(
    user_id: str,
    req: WatchlistEntryRequest,
    repo: WatchlistRepositoryPort = Depends(get_watchlist_repository),
) -> Dict[str, Any]:
    try:
        entry = prepare_new_entry(req.model_dump(by_alias=True, exclude_none=True))
        entries = await repo.add_entry(user_id=user_id, entry=entry)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _payload(entries)


@router.delete("/users/{user_id}/watchlist/{movie_id}", response_model=WatchlistResponse)
async def remove_from_watchlist(
    user_id: str,
    movie_id: str,
    repo: WatchlistRepositoryPort = Depends(get_watchlist_repository),
) -> Dict[str, Any]:
    # Removing a movie that is not listed is not an error.
    return _payload(await repo.remove_entry(user_id=user_id, movie_id=movie_id))
