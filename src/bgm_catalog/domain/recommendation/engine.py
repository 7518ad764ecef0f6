"""
Track recommendation engine.

Pure functional implementation with no side effects or storage access.
Selection runs in three passes over a snapshot of the collection:

1. Cooldown: tracks used within the cooldown window are not candidates.
   If nothing survives, pick uniformly from the whole collection.
2. Affinity: count how often each tag appears on tracks used within the
   affinity window (cooldown tracks included), then score each candidate
   by summing the counts of its own tags.
3. Selection: stable sort by score, pick uniformly among the top K.

The only non-deterministic step is the final pick, which draws from an
injectable random source.
"""

import random
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, Sequence, TypeVar

from loguru import logger

from bgm_catalog.domain.library.models import Track

DEFAULT_COOLDOWN_DAYS = 7
DEFAULT_AFFINITY_WINDOW_DAYS = 30
DEFAULT_TOP_K = 3

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with a `choice` method (random.Random, the random module)."""

    def choice(self, seq: Sequence[T]) -> T: ...


@dataclass(frozen=True)
class ScoredTrack:
    """A cooldown candidate and its affinity score."""

    track: Track
    score: int


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def cooldown_candidates(
    tracks: Sequence[Track],
    now: datetime,
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS,
) -> list[Track]:
    """Return tracks eligible for scoring, in input order.

    A track is a candidate if it has never been used, or was last used
    strictly before `now - cooldown_days`.
    """
    cutoff = _as_utc(now) - timedelta(days=cooldown_days)
    return [
        track
        for track in tracks
        if track.last_used_at is None or _as_utc(track.last_used_at) < cutoff
    ]


def tag_frequencies(
    tracks: Sequence[Track],
    now: datetime,
    window_days: int = DEFAULT_AFFINITY_WINDOW_DAYS,
) -> Counter:
    """Count tag occurrences across tracks used within the window.

    Every track whose last use falls strictly after `now - window_days`
    contributes one count per tag in its mood tags and its usage tags.
    A tag present in both lists of one track counts twice.

    Args:
        tracks: Full collection (not just candidates)
        now: Reference time
        window_days: Length of the affinity window

    Returns:
        Counter mapping tag string to occurrence count
    """
    cutoff = _as_utc(now) - timedelta(days=window_days)
    frequencies: Counter = Counter()
    for track in tracks:
        if track.last_used_at is not None and _as_utc(track.last_used_at) > cutoff:
            frequencies.update(track.all_tags)
    return frequencies


def affinity_score(track: Track, frequencies: Counter) -> int:
    """Sum the frequency counts of a track's mood and usage tags."""
    return sum(frequencies[tag] for tag in track.all_tags)


def rank_candidates(
    tracks: Sequence[Track],
    now: datetime,
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS,
    affinity_window_days: int = DEFAULT_AFFINITY_WINDOW_DAYS,
) -> list[ScoredTrack]:
    """Score cooldown candidates and order them by score, highest first.

    Ties keep their relative input order. Returns an empty list when every
    track is in cooldown.
    """
    candidates = cooldown_candidates(tracks, now, cooldown_days)
    if not candidates:
        return []

    frequencies = tag_frequencies(tracks, now, affinity_window_days)
    scored = [
        ScoredTrack(track=track, score=affinity_score(track, frequencies))
        for track in candidates
    ]
    # sorted() is stable, so equal scores stay in candidate order
    return sorted(scored, key=lambda item: item.score, reverse=True)


def recommend(
    tracks: Sequence[Track],
    now: datetime,
    rng: Optional[RandomSource] = None,
    *,
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS,
    affinity_window_days: int = DEFAULT_AFFINITY_WINDOW_DAYS,
    top_k: int = DEFAULT_TOP_K,
) -> Optional[Track]:
    """Pick one track to suggest.

    Args:
        tracks: Snapshot of the full collection (not modified)
        now: Reference time for the cooldown and affinity windows
        rng: Random source for the final pick (default: the random module)
        cooldown_days: Tracks used within this many days are excluded
        affinity_window_days: Tracks used within this many days shape scores
        top_k: Size of the slice of best-scoring candidates to pick from

    Returns:
        A track from `tracks`, or None if `tracks` is empty
    """
    if not tracks:
        return None

    rng = rng if rng is not None else random

    ranked = rank_candidates(tracks, now, cooldown_days, affinity_window_days)
    if not ranked:
        logger.debug(
            f"All {len(tracks)} tracks used within {cooldown_days} days, "
            "picking from full collection"
        )
        return rng.choice(list(tracks))

    top = ranked[: min(top_k, len(ranked))]
    logger.debug(
        f"Recommending from top {len(top)} of {len(ranked)} candidates "
        f"(scores: {[item.score for item in top]})"
    )
    return rng.choice(top).track
