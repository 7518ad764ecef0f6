"""Recommendation entry point bound to a track store."""

from typing import Optional

from bgm_catalog.core.config import RecommendationConfig
from bgm_catalog.domain.library.models import Track
from bgm_catalog.domain.library.store import TrackStore

from .engine import RandomSource, ScoredTrack, rank_candidates, recommend


def recommend_from_store(
    store: TrackStore,
    rng: Optional[RandomSource] = None,
    config: Optional[RecommendationConfig] = None,
) -> Optional[Track]:
    """Recommend a track from the store's current collection.

    Reads one consistent snapshot, then scores it without holding the
    store lock. The recommended track is not marked used.
    """
    config = config or RecommendationConfig()
    tracks, now = store.snapshot()
    return recommend(
        tracks,
        now,
        rng,
        cooldown_days=config.cooldown_days,
        affinity_window_days=config.affinity_window_days,
        top_k=config.top_k,
    )


def explain_ranking(
    store: TrackStore, config: Optional[RecommendationConfig] = None
) -> list[ScoredTrack]:
    """Scored cooldown candidates for the store's collection, best first."""
    config = config or RecommendationConfig()
    tracks, now = store.snapshot()
    return rank_candidates(
        tracks,
        now,
        cooldown_days=config.cooldown_days,
        affinity_window_days=config.affinity_window_days,
    )


def explain_recommendation(
    store: TrackStore,
    rng: Optional[RandomSource] = None,
    config: Optional[RecommendationConfig] = None,
) -> tuple[Optional[Track], list[ScoredTrack]]:
    """Recommend a track and return the ranking it was drawn from.

    Both come from the same snapshot, so the top-K of the ranking is
    exactly the pool the pick was made from (unless the fallback applied,
    in which case the ranking is empty).
    """
    config = config or RecommendationConfig()
    tracks, now = store.snapshot()
    ranked = rank_candidates(
        tracks,
        now,
        cooldown_days=config.cooldown_days,
        affinity_window_days=config.affinity_window_days,
    )
    track = recommend(
        tracks,
        now,
        rng,
        cooldown_days=config.cooldown_days,
        affinity_window_days=config.affinity_window_days,
        top_k=config.top_k,
    )
    return track, ranked
