from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

_DEFAULT_RULES_PATH = Path(__file__).resolve().parent / "recommendation_rules.yaml"
_RULES_CACHE: "RecommendationRules | None" = None
RECOMMENDATION_RULES_PATH_ENV = "RECOMMENDATION_RULES_PATH"
RECOMMENDATION_RULES_RELOAD_ENV = "RECOMMENDATION_RULES_RELOAD"

MAX_RECOMMENDATIONS = 20


@dataclass(frozen=True)
class RecommendationRules:
    popularity_weight: float = 0.5
    genre_weight: float = 0.5
    language_weight: float = 0.1
    exclude_adult: bool = True
    min_vote_average: float = 0.0
    min_vote_count: int = 10
    limit: int = MAX_RECOMMENDATIONS


def _load_rules(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return data if isinstance(data, dict) else {}


def _float(section: Dict[str, Any], key: str, default: float, *, minimum: float = 0.0) -> float:
    try:
        value = float(section.get(key, default))
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


def _normalize_rules(data: Dict[str, Any]) -> RecommendationRules:
    defaults = RecommendationRules()
    scoring = data.get("scoring", {})
    if not isinstance(scoring, dict):
        scoring = {}
    filters = data.get("filters", {})
    if not isinstance(filters, dict):
        filters = {}

    try:
        min_vote_count = int(filters.get("min_vote_count", defaults.min_vote_count))
    except (TypeError, ValueError):
        min_vote_count = defaults.min_vote_count
    if min_vote_count < 0:
        min_vote_count = 0

    try:
        limit = int(data.get("limit", defaults.limit))
    except (TypeError, ValueError):
        limit = defaults.limit
    # The result list is never longer than MAX_RECOMMENDATIONS.
    if limit < 1 or limit > MAX_RECOMMENDATIONS:
        limit = MAX_RECOMMENDATIONS

    return RecommendationRules(
        popularity_weight=_float(scoring, "popularity_weight", defaults.popularity_weight),
        genre_weight=_float(scoring, "genre_weight", defaults.genre_weight),
        language_weight=_float(scoring, "language_weight", defaults.language_weight),
        exclude_adult=bool(filters.get("exclude_adult", defaults.exclude_adult)),
        min_vote_average=_float(filters, "min_vote_average", defaults.min_vote_average),
        min_vote_count=min_vote_count,
        limit=limit,
    )


def _resolve_rules_path(path: Path | None) -> Path:
    if path is not None:
        return path
    env_path = os.getenv(RECOMMENDATION_RULES_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return _DEFAULT_RULES_PATH


def _should_reload(reload: bool | None) -> bool:
    if reload is not None:
        return reload
    env_value = os.getenv(RECOMMENDATION_RULES_RELOAD_ENV, "").strip().lower()
    return env_value in {"1", "true", "yes", "on"}


def load_recommendation_rules(path: Path | None = None) -> RecommendationRules:
    resolved_path = _resolve_rules_path(path)
    return _normalize_rules(_load_rules(resolved_path))


def get_recommendation_rules(
    reload: bool | None = None,
    path: Path | None = None,
) -> RecommendationRules:
    global _RULES_CACHE
    if _RULES_CACHE is None or _should_reload(reload):
        _RULES_CACHE = load_recommendation_rules(path)
    return _RULES_CACHE


__all__ = [
    "MAX_RECOMMENDATIONS",
    "RECOMMENDATION_RULES_PATH_ENV",
    "RECOMMENDATION_RULES_RELOAD_ENV",
    "RecommendationRules",
    "get_recommendation_rules",
    "load_recommendation_rules",
]
