"""Shared fixtures for catalog tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from bgm_catalog.domain.library.models import Track
from bgm_catalog.domain.library.storage import JsonFileStorage
from bgm_catalog.domain.library.store import TrackStore

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock returning a settable time, advanced explicitly by tests."""

    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_track(
    track_id: str,
    mood: tuple[str, ...] = (),
    usage: tuple[str, ...] = (),
    days_ago: float | None = None,
    now: datetime = NOW,
) -> Track:
    """Build a track last used `days_ago` days before `now` (None = never used)."""
    last_used_at = now - timedelta(days=days_ago) if days_ago is not None else None
    return Track(
        id=track_id,
        title=f"Track {track_id}",
        artist="Test Artist",
        created_at=now - timedelta(days=90),
        mood_tags=mood,
        usage_tags=usage,
        used_count=0 if last_used_at is None else 1,
        last_used_at=last_used_at,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "bgm_tracks.json"


@pytest.fixture
def storage(data_file: Path) -> JsonFileStorage:
    return JsonFileStorage(data_file)


@pytest.fixture
def store(storage: JsonFileStorage, clock: FixedClock) -> TrackStore:
    return TrackStore(storage, clock=clock)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def track_factory():
    """Factory for Track values relative to the fixed NOW."""
    return make_track
