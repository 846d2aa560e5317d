import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# The project-root .env is the primary development config source and must win
# over stale shell variables.
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer, got {raw}") from exc


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a float, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


# ===== Paths =====
#
# All backend code lives under `<repo>/backend/`; runtime artifacts go to
# `<repo>/files/`, never under `backend/`.

INFRASTRUCTURE_DIR = Path(__file__).resolve().parent.parent  # backend/infrastructure/
_BACKEND_DIR = INFRASTRUCTURE_DIR.parent  # backend/

# Prefer repo root in the monorepo layout; otherwise fall back to cwd
# (installed packages / containers).
if _BACKEND_DIR.name == "backend":
    PROJECT_ROOT = _BACKEND_DIR.parent
else:
    PROJECT_ROOT = Path.cwd()

RUNTIME_ROOT = Path(os.getenv("RUNTIME_ROOT", PROJECT_ROOT / "files")).expanduser()


# ===== Remote watchlist service (client side) =====

WATCHLIST_API_BASE_URL = (
    os.getenv("WATCHLIST_API_BASE_URL", "http://localhost:5000/api").strip() or "http://localhost:5000/api"
)
# Static bearer token; a signed-in session token takes precedence.
WATCHLIST_API_TOKEN = os.getenv("WATCHLIST_API_TOKEN", "").strip()
WATCHLIST_API_TIMEOUT_S = _get_env_float("WATCHLIST_API_TIMEOUT_S", 10.0) or 10.0
# `{user_id}` / `{movie_id}` are substituted per request.
WATCHLIST_LIST_PATH = (
    os.getenv("WATCHLIST_LIST_PATH", "/users/{user_id}/watchlist").strip() or "/users/{user_id}/watchlist"
)
WATCHLIST_ITEM_PATH = (
    os.getenv("WATCHLIST_ITEM_PATH", "/users/{user_id}/watchlist/{movie_id}").strip()
    or "/users/{user_id}/watchlist/{movie_id}"
)


# ===== Local durable storage =====

# file | memory
WATCHLIST_LOCAL_PROVIDER = os.getenv("WATCHLIST_LOCAL_PROVIDER", "file").strip().lower()
WATCHLIST_LOCAL_PATH = Path(
    os.getenv("WATCHLIST_LOCAL_PATH", RUNTIME_ROOT / "watchlist.json")
).expanduser()

# Signed-out "add" stashes the movie and asks for a login instead of saving locally.
WATCHLIST_REQUIRE_LOGIN_FOR_ADD = _get_env_bool("WATCHLIST_REQUIRE_LOGIN_FOR_ADD", True)
