"""
Track record store for BGM Catalog.

The store is the single owner of the track collection. Every operation
re-reads the persisted document, and every mutation writes the full
collection back before returning. Mutations run inside one lock so
interleaved callers in the same process cannot lose updates.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from .exceptions import TrackNotFoundError
from .models import Track, TrackData, utc_now
from .storage import JsonFileStorage


def _find_index(tracks: list[Track], track_id: str) -> int:
    """Position of the track with `track_id`, or -1."""
    for index, track in enumerate(tracks):
        if track.id == track_id:
            return index
    return -1


class TrackStore:
    """Create, update, delete and mark tracks used, with write-through persistence."""

    def __init__(
        self,
        storage: JsonFileStorage,
        clock: Callable[[], datetime] = utc_now,
        validate: bool = False,
    ):
        """Initialize the store.

        Args:
            storage: Backend holding the persisted collection
            clock: Source of "now" for created_at / last_used_at
            validate: Reject empty titles/artists on create and update
        """
        self.storage = storage
        self.clock = clock
        self.validate = validate
        self._lock = threading.RLock()
        self._issued_ids: set[str] = set()

    def _new_id(self, tracks: list[Track]) -> str:
        existing = {track.id for track in tracks}
        while True:
            track_id = uuid.uuid4().hex
            if track_id not in existing and track_id not in self._issued_ids:
                self._issued_ids.add(track_id)
                return track_id

    def list_tracks(self) -> list[Track]:
        """Return the full collection in creation order."""
        with self._lock:
            return self.storage.load_tracks()

    def get_track(self, track_id: str) -> Optional[Track]:
        """Look up a single track by id, or None if absent."""
        with self._lock:
            tracks = self.storage.load_tracks()
        index = _find_index(tracks, track_id)
        return tracks[index] if index != -1 else None

    def create_track(self, data: TrackData) -> Track:
        """Add a new track built from `data`.

        Args:
            data: User-editable fields for the track

        Returns:
            The stored track (fresh id, used_count 0, no last_used_at)

        Raises:
            ValidationError: If validation is enabled and data is invalid
            PersistenceError: If the collection cannot be read or written
        """
        if self.validate:
            data.validate()

        with self._lock:
            tracks = self.storage.load_tracks()
            track = Track(
                id=self._new_id(tracks),
                created_at=self.clock(),
                used_count=0,
                last_used_at=None,
                title=data.title,
                artist=data.artist,
                platform_url=data.platform_url,
                mood_tags=data.mood_tags,
                usage_tags=data.usage_tags,
                notes=data.notes,
                favorite=data.favorite,
            )
            tracks.append(track)
            self.storage.save_tracks(tracks)

        logger.info(f"Created track {track.id}: {track.artist} - {track.title}")
        return track

    def update_track(self, track_id: str, data: TrackData) -> Track:
        """Replace the editable fields of an existing track.

        id, used_count, last_used_at and created_at are carried over.

        Raises:
            TrackNotFoundError: If no track has `track_id`
            ValidationError: If validation is enabled and data is invalid
            PersistenceError: If the collection cannot be read or written
        """
        if self.validate:
            data.validate()

        with self._lock:
            tracks = self.storage.load_tracks()
            index = _find_index(tracks, track_id)
            if index == -1:
                logger.warning(f"Update failed, track not found: {track_id}")
                raise TrackNotFoundError(track_id)

            updated = tracks[index].with_data(data)
            tracks[index] = updated
            self.storage.save_tracks(tracks)

        logger.info(f"Updated track {track_id}")
        return updated

    def delete_track(self, track_id: str) -> None:
        """Remove a track. Deleting an unknown id is a no-op."""
        with self._lock:
            tracks = self.storage.load_tracks()
            remaining = [track for track in tracks if track.id != track_id]
            if len(remaining) == len(tracks):
                logger.debug(f"Delete skipped, track not found: {track_id}")
                return
            self.storage.save_tracks(remaining)

        logger.info(f"Deleted track {track_id}")

    def mark_used(self, track_id: str) -> Track:
        """Record a use of a track: used_count + 1, last_used_at = now.

        Raises:
            TrackNotFoundError: If no track has `track_id`
            PersistenceError: If the collection cannot be read or written
        """
        with self._lock:
            tracks = self.storage.load_tracks()
            index = _find_index(tracks, track_id)
            if index == -1:
                logger.warning(f"Mark used failed, track not found: {track_id}")
                raise TrackNotFoundError(track_id)

            track = tracks[index]
            updated = replace(
                track, used_count=track.used_count + 1, last_used_at=self.clock()
            )
            tracks[index] = updated
            self.storage.save_tracks(tracks)

        logger.info(f"Marked track {track_id} used (count={updated.used_count})")
        return updated

    def toggle_favorite(self, track_id: str) -> Track:
        """Flip the favorite flag of a track.

        Raises:
            TrackNotFoundError: If no track has `track_id`
            PersistenceError: If the collection cannot be read or written
        """
        with self._lock:
            tracks = self.storage.load_tracks()
            index = _find_index(tracks, track_id)
            if index == -1:
                logger.warning(f"Favorite toggle failed, track not found: {track_id}")
                raise TrackNotFoundError(track_id)

            updated = replace(tracks[index], favorite=not tracks[index].favorite)
            tracks[index] = updated
            self.storage.save_tracks(tracks)

        logger.info(f"Track {track_id} favorite={updated.favorite}")
        return updated

    def snapshot(self) -> tuple[list[Track], datetime]:
        """Read the collection and the current time as one consistent view."""
        with self._lock:
            return self.storage.load_tracks(), self.clock()
