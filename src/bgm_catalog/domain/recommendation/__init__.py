"""Recommendation domain - pick one track per request.

Cooldown exclusion, recent-tag affinity scoring and a randomized
top-K pick over a snapshot of the catalog.
"""

from .engine import (
    DEFAULT_AFFINITY_WINDOW_DAYS,
    DEFAULT_COOLDOWN_DAYS,
    DEFAULT_TOP_K,
    ScoredTrack,
    affinity_score,
    cooldown_candidates,
    rank_candidates,
    recommend,
    tag_frequencies,
)
from .service import explain_ranking, explain_recommendation, recommend_from_store

__all__ = [
    "DEFAULT_AFFINITY_WINDOW_DAYS",
    "DEFAULT_COOLDOWN_DAYS",
    "DEFAULT_TOP_K",
    "ScoredTrack",
    "affinity_score",
    "cooldown_candidates",
    "rank_candidates",
    "recommend",
    "tag_frequencies",
    "explain_ranking",
    "explain_recommendation",
    "recommend_from_store",
]
