"""
Track catalog domain models.

Contains data structures for representing BGM tracks and their
JSON representation on disk.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from .exceptions import ValidationError


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def dedupe_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Drop exact-duplicate tags, keeping first-occurrence order."""
    seen: set[str] = set()
    result = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return tuple(result)


@dataclass(frozen=True)
class TrackData:
    """User-editable fields of a track.

    This is the payload for creating and updating tracks; identity and
    usage metadata are owned by the store.
    """

    title: str
    artist: str
    platform_url: Optional[str] = None
    mood_tags: tuple[str, ...] = field(default_factory=tuple)
    usage_tags: tuple[str, ...] = field(default_factory=tuple)
    notes: str = ""
    favorite: bool = False

    def __post_init__(self) -> None:
        # Accept any iterable of tags, store as deduplicated tuples
        object.__setattr__(self, "mood_tags", dedupe_tags(self.mood_tags))
        object.__setattr__(self, "usage_tags", dedupe_tags(self.usage_tags))

    def validate(self) -> None:
        """Check the required display fields.

        Raises:
            ValidationError: If title or artist is empty or whitespace-only
        """
        if not self.title or not self.title.strip():
            raise ValidationError("Track title is required")
        if not self.artist or not self.artist.strip():
            raise ValidationError("Track artist is required")


@dataclass(frozen=True)
class Track:
    """Represents a catalogued BGM track.

    Tracks are immutable values; the store produces a new Track for every
    change (update, mark used, favorite toggle).
    """

    id: str
    title: str
    artist: str
    created_at: datetime
    platform_url: Optional[str] = None
    mood_tags: tuple[str, ...] = field(default_factory=tuple)
    usage_tags: tuple[str, ...] = field(default_factory=tuple)
    notes: str = ""
    favorite: bool = False
    used_count: int = 0
    last_used_at: Optional[datetime] = None  # None until first marked used

    @property
    def all_tags(self) -> tuple[str, ...]:
        """Mood tags followed by usage tags (may repeat across the two lists)."""
        return self.mood_tags + self.usage_tags

    @property
    def data(self) -> TrackData:
        """The user-editable part of this track."""
        return TrackData(
            title=self.title,
            artist=self.artist,
            platform_url=self.platform_url,
            mood_tags=self.mood_tags,
            usage_tags=self.usage_tags,
            notes=self.notes,
            favorite=self.favorite,
        )

    def with_data(self, data: TrackData) -> "Track":
        """Return a copy with editable fields replaced, metadata preserved."""
        return replace(
            self,
            title=data.title,
            artist=data.artist,
            platform_url=data.platform_url,
            mood_tags=data.mood_tags,
            usage_tags=data.usage_tags,
            notes=data.notes,
            favorite=data.favorite,
        )


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601 (UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are treated as UTC.

    Accepts the trailing 'Z' form written by browsers
    (e.g. '2024-05-01T10:00:00.000Z').

    Raises:
        TypeError: If value is not a string
        ValueError: If value is not ISO-8601
    """
    if not isinstance(value, str):
        raise TypeError(f"Timestamp must be a string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def track_to_dict(track: Track) -> dict[str, Any]:
    """Convert a track to its JSON-serializable form.

    Optional fields are omitted entirely when absent.
    """
    payload: dict[str, Any] = {
        "id": track.id,
        "title": track.title,
        "artist": track.artist,
    }
    if track.platform_url is not None:
        payload["platformUrl"] = track.platform_url
    payload["moodTags"] = list(track.mood_tags)
    payload["usageTags"] = list(track.usage_tags)
    payload["notes"] = track.notes
    payload["favorite"] = track.favorite
    payload["usedCount"] = track.used_count
    if track.last_used_at is not None:
        payload["lastUsedAt"] = format_timestamp(track.last_used_at)
    payload["createdAt"] = format_timestamp(track.created_at)
    return payload


def _tag_list(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    tags = payload.get(key, [])
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise TypeError(f"{key} must be a list of strings")
    return dedupe_tags(tags)


def track_from_dict(payload: dict[str, Any]) -> Track:
    """Build a track from its JSON form.

    Raises:
        KeyError: If a required field is missing
        TypeError: If the record or one of its fields has the wrong type
        ValueError: If a timestamp cannot be parsed
    """
    if not isinstance(payload, dict):
        raise TypeError(f"Track record must be an object, got {type(payload).__name__}")
    last_used_at = payload.get("lastUsedAt")
    return Track(
        id=payload["id"],
        title=payload["title"],
        artist=payload["artist"],
        platform_url=payload.get("platformUrl"),
        mood_tags=_tag_list(payload, "moodTags"),
        usage_tags=_tag_list(payload, "usageTags"),
        notes=payload.get("notes", ""),
        favorite=bool(payload.get("favorite", False)),
        used_count=int(payload.get("usedCount", 0)),
        last_used_at=parse_timestamp(last_used_at) if last_used_at is not None else None,
        created_at=parse_timestamp(payload["createdAt"]),
    )
