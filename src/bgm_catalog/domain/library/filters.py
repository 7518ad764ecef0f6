"""Catalog browsing helpers: search, tag filters, and tag vocabularies.

These mirror the home screen (search box, favorites toggle, mood and usage
dropdowns) and the edit form (suggested tags) of the catalog.
"""

from typing import Iterable, Optional

from .models import Track

MOOD_SUGGESTIONS = (
    "Calm",
    "Deep",
    "Soft Morning",
    "Night",
    "Forest",
    "Sea",
    "Energetic",
    "Melancholy",
)
USAGE_SUGGESTIONS = (
    "Awareness",
    "Healing",
    "Quiet Repost",
    "Story",
    "Vlog",
    "Travel",
    "Work",
)


def matches_search(track: Track, query: str) -> bool:
    """Case-insensitive substring match on title, artist and all tags.

    An empty query matches every track.
    """
    needle = query.lower()
    if not needle:
        return True
    haystack = [track.title, track.artist, *track.mood_tags, *track.usage_tags]
    return any(needle in value.lower() for value in haystack)


def filter_tracks(
    tracks: Iterable[Track],
    search: str = "",
    favorites_only: bool = False,
    mood: Optional[str] = None,
    usage: Optional[str] = None,
) -> list[Track]:
    """Apply all browsing filters, preserving collection order.

    Args:
        tracks: Tracks to filter
        search: Free-text query (see matches_search)
        favorites_only: Keep only favorited tracks
        mood: Keep only tracks carrying this exact mood tag
        usage: Keep only tracks carrying this exact usage tag

    Returns:
        Tracks matching every given filter
    """
    result = []
    for track in tracks:
        if not matches_search(track, search):
            continue
        if favorites_only and not track.favorite:
            continue
        if mood and mood not in track.mood_tags:
            continue
        if usage and usage not in track.usage_tags:
            continue
        result.append(track)
    return result


def collect_tags(tracks: Iterable[Track]) -> tuple[list[str], list[str]]:
    """Distinct mood and usage tags in use, in first-seen order."""
    moods: dict[str, None] = {}
    usages: dict[str, None] = {}
    for track in tracks:
        moods.update(dict.fromkeys(track.mood_tags))
        usages.update(dict.fromkeys(track.usage_tags))
    return list(moods), list(usages)


def tag_vocabulary(tracks: Iterable[Track]) -> tuple[list[str], list[str]]:
    """Suggested tags followed by any custom tags already in use."""
    moods, usages = collect_tags(tracks)
    mood_vocab = list(MOOD_SUGGESTIONS) + [t for t in moods if t not in MOOD_SUGGESTIONS]
    usage_vocab = list(USAGE_SUGGESTIONS) + [
        t for t in usages if t not in USAGE_SUGGESTIONS
    ]
    return mood_vocab, usage_vocab


def normalize_tag_input(raw_tags: Iterable[str]) -> list[str]:
    """Trim user-entered tags and drop empty ones (duplicates are kept here)."""
    return [tag.strip() for tag in raw_tags if tag and tag.strip()]
