import os

from dotenv import load_dotenv

# Service-side settings: HTTP/runtime switches for the watchlist REST service.
# Client adapter settings live under `backend/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """Read an integer env var, falling back to ``default`` when unset."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var (true/false/1/0/yes/no/on/off)."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


# ===== FastAPI / Uvicorn =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_env_int("SERVER_PORT", 5000)
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")
SERVER_WORKERS = _get_env_int("SERVER_WORKERS", 1) or 1

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== Auth =====

# Shared key accepted as "Bearer <key>"; empty disables the check.
WATCHLIST_API_KEY = os.getenv("WATCHLIST_API_KEY", "").strip()
