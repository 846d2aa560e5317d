from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WatchlistEntryRequest(BaseModel):
    """Body of POST /users/{user_id}/watchlist (camelCase or legacy ``id``)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    movie_id: Optional[Union[str, int]] = Field(default=None, alias="movieId", description="Movie id")
    id: Optional[Any] = Field(default=None, description="Legacy movie id (TMDB numeric id)")
    title: str = Field(..., description="Movie title")
    poster: Optional[str] = Field(default=None, description="Poster URL")
    poster_path: Optional[str] = Field(default=None, description="TMDB poster path")
    overview: Optional[str] = None
    year: Optional[Union[str, int]] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None


class WatchlistResponse(BaseModel):
    """Every watchlist endpoint returns the user's full list."""

    watchlist: List[Dict[str, Any]]
