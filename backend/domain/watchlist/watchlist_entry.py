from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

TMDB_POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
POSTER_PLACEHOLDER_URL = "https://via.placeholder.com/500x750?text=No+Image"


@dataclass(frozen=True)
class WatchlistEntry:
    """A movie saved to a user's watchlist (canonical shape, one per movie_id)."""

    movie_id: str
    title: str
    poster: Optional[str] = None
    overview: Optional[str] = None
    year: Optional[str] = None
    # Assigned by the remote service; local-only entries never carry it.
    added_at: Optional[datetime] = None
    vote_average: Optional[float] = None


def coerce_movie_id(value: Any) -> str:
    """String form of a movie identifier (``27205`` and ``"27205"`` compare equal)."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _year_from(raw: Mapping[str, Any]) -> Optional[str]:
    year = raw.get("year")
    if year not in (None, ""):
        return str(year).strip()
    release_date = str(raw.get("release_date") or raw.get("releaseDate") or "").strip()
    if len(release_date) >= 4 and release_date[:4].isdigit():
        return release_date[:4]
    return None


def _poster_from(raw: Mapping[str, Any]) -> Optional[str]:
    poster = raw.get("poster")
    if poster:
        return str(poster)
    poster_path = raw.get("poster_path") or raw.get("posterPath")
    if poster_path:
        return f"{TMDB_POSTER_BASE_URL}{poster_path}"
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_entry(raw: Any) -> WatchlistEntry:
    """Build a WatchlistEntry from any of the upstream record shapes.

    Accepts an existing entry, or a mapping keyed with ``movieId``/``movie_id``
    or the legacy ``id`` (TMDB search results), with camelCase or snake_case
    timestamps. Raises ``ValueError`` when no identifier can be found.
    """
    if isinstance(raw, WatchlistEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"unsupported watchlist record: {type(raw).__name__}")

    movie_id = ""
    for key in ("movieId", "movie_id", "id"):
        movie_id = coerce_movie_id(raw.get(key))
        if movie_id:
            break
    if not movie_id:
        raise ValueError("watchlist record has no movie id")

    return WatchlistEntry(
        movie_id=movie_id,
        title=str(raw.get("title") or raw.get("name") or ""),
        poster=_poster_from(raw),
        overview=_optional_str(raw.get("overview")),
        year=_year_from(raw),
        added_at=_parse_timestamp(raw.get("addedAt") or raw.get("added_at")),
        vote_average=_optional_float(raw.get("vote_average", raw.get("voteAverage"))),
    )


def normalize_entries(payload: Iterable[Any] | None) -> list[WatchlistEntry]:
    """Normalize a list of records, dropping unusable ones and duplicate ids (first wins)."""
    out: list[WatchlistEntry] = []
    seen: set[str] = set()
    for raw in payload or []:
        try:
            entry = normalize_entry(raw)
        except ValueError:
            continue
        if entry.movie_id in seen:
            continue
        seen.add(entry.movie_id)
        out.append(entry)
    return out


def prepare_new_entry(raw: Any, *, now: Optional[datetime] = None) -> WatchlistEntry:
    """Normalize an entry about to be added.

    Missing posters fall back to the placeholder image and a missing year to
    the current year, matching what the movie pages send.
    """
    entry = normalize_entry(raw)
    poster = entry.poster or POSTER_PLACEHOLDER_URL
    year = entry.year or str((now or datetime.now(timezone.utc)).year)
    if poster == entry.poster and year == entry.year:
        return entry
    return WatchlistEntry(
        movie_id=entry.movie_id,
        title=entry.title,
        poster=poster,
        overview=entry.overview,
        year=year,
        added_at=entry.added_at,
        vote_average=entry.vote_average,
    )


def entry_to_dict(entry: WatchlistEntry) -> dict[str, Any]:
    """Wire/persistence shape (camelCase, optional fields omitted)."""
    data: dict[str, Any] = {"movieId": entry.movie_id, "title": entry.title}
    if entry.poster is not None:
        data["poster"] = entry.poster
    if entry.overview is not None:
        data["overview"] = entry.overview
    if entry.year is not None:
        data["year"] = entry.year
    if entry.added_at is not None:
        data["addedAt"] = entry.added_at.isoformat()
    if entry.vote_average is not None:
        data["vote_average"] = entry.vote_average
    return data
