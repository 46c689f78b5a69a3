from domain.config.recommendation_rules import (
    MAX_RECOMMENDATIONS,
    RECOMMENDATION_RULES_PATH_ENV,
    RECOMMENDATION_RULES_RELOAD_ENV,
    RecommendationRules,
    get_recommendation_rules,
    load_recommendation_rules,
)

__all__ = [
    "MAX_RECOMMENDATIONS",
    "RECOMMENDATION_RULES_PATH_ENV",
    "RECOMMENDATION_RULES_RELOAD_ENV",
    "RecommendationRules",
    "get_recommendation_rules",
    "load_recommendation_rules",
]
