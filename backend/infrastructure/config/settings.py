import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# The project-root .env is the primary development config source and must win
# over stale shell exports.
load_dotenv(override=True)


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} expects a float, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


# ===== Paths =====
#
# NOTE:
# - All backend code lives under `<repo>/backend/`.
# - Runtime artifacts (the persisted watchlist) live under `<repo>/files/`,
#   NOT under `<repo>/backend/`.

INFRASTRUCTURE_DIR = Path(__file__).resolve().parent.parent  # backend/infrastructure/
_BACKEND_DIR = INFRASTRUCTURE_DIR.parent  # backend/

# Prefer repo root when the monorepo layout is detected; otherwise fall back to cwd
# (installed packages / container deployments).
if _BACKEND_DIR.name == "backend":
    PROJECT_ROOT = _BACKEND_DIR.parent
else:
    PROJECT_ROOT = Path.cwd()

RUNTIME_ROOT = Path(os.getenv("RUNTIME_ROOT", PROJECT_ROOT / "files")).expanduser()


# ===== TMDB catalog =====

TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").strip()
TMDB_API_TOKEN = os.getenv("TMDB_API_TOKEN", "").strip()
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "").strip()
TMDB_TIMEOUT_S = _get_env_float("TMDB_TIMEOUT_S", 10.0) or 10.0
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US").strip() or "en-US"
# Optional ISO-3166 region hint for list endpoints (e.g. "US").
TMDB_REGION = os.getenv("TMDB_REGION", "").strip() or None
# Trending window: "day" or "week".
TMDB_TRENDING_WINDOW = os.getenv("TMDB_TRENDING_WINDOW", "week").strip().lower() or "week"
if TMDB_TRENDING_WINDOW not in {"day", "week"}:
    raise ValueError(f"TMDB_TRENDING_WINDOW must be day or week, got {TMDB_TRENDING_WINDOW}")
TMDB_INCLUDE_ADULT = _get_env_bool("TMDB_INCLUDE_ADULT", False)


# ===== Watchlist persistence =====

# Persistence provider: json or null (in-memory only).
WATCHLIST_PROVIDER = os.getenv("WATCHLIST_PROVIDER", "json").strip().lower()
WATCHLIST_PATH = Path(os.getenv("WATCHLIST_PATH", RUNTIME_ROOT / "watchlist.json")).expanduser()
