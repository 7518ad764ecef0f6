"""
JSON document storage for the track collection.

The whole collection lives in one JSON document under a single logical
key. Every write replaces the document atomically (temp file + os.replace).
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from .exceptions import PersistenceError
from .models import Track, track_from_dict, track_to_dict

# Logical key for the collection; also the default file stem
STORAGE_KEY = "bgm_tracks"

# Document schema version for migrations
SCHEMA_VERSION = 1


def migrate_document(document: Any) -> list[dict[str, Any]]:
    """Upgrade a stored document to the current schema and return its tracks.

    Version 0 is the original unversioned layout: a bare JSON array of tracks.

    Raises:
        PersistenceError: If the document shape or version is not understood
    """
    if isinstance(document, list):
        logger.info("Reading unversioned track collection (schema 0)")
        return document

    if not isinstance(document, dict):
        raise PersistenceError(
            f"Unexpected document type: {type(document).__name__}"
        )

    version = document.get("schemaVersion")
    if not isinstance(version, int) or isinstance(version, bool):
        raise PersistenceError(f"Missing or invalid schemaVersion: {version!r}")
    if version > SCHEMA_VERSION:
        raise PersistenceError(
            f"Collection schema version {version} is newer than supported "
            f"version {SCHEMA_VERSION}"
        )

    tracks = document.get("tracks", [])
    if not isinstance(tracks, list):
        raise PersistenceError("Document 'tracks' field must be a list")
    return tracks


class JsonFileStorage:
    """Persist the track collection as a JSON document on the local filesystem."""

    def __init__(self, path: Path, key: str = STORAGE_KEY):
        """Initialize storage.

        Args:
            path: JSON file holding the collection (created on first write)
            key: Logical record name, recorded in the document
        """
        self.path = Path(path)
        self.key = key

    def load_tracks(self) -> list[Track]:
        """Read the full collection.

        A missing file is an empty collection.

        Raises:
            PersistenceError: If the file cannot be read or decoded
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read track collection from {self.path}: {e}")
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

        raw_tracks = migrate_document(document)
        try:
            return [track_from_dict(item) for item in raw_tracks]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed track record in {self.path}: {e!r}")
            raise PersistenceError(f"Malformed track record in {self.path}: {e!r}") from e

    def save_tracks(self, tracks: list[Track]) -> None:
        """Replace the stored collection with `tracks`.

        Raises:
            PersistenceError: If serialization or the write fails
        """
        document = {
            "schemaVersion": SCHEMA_VERSION,
            "key": self.key,
            "tracks": [track_to_dict(track) for track in tracks],
        }

        try:
            content = json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize track collection: {e}")
            raise PersistenceError(f"Cannot serialize track collection: {e}") from e

        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            temp_path = Path(temp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write track collection to {self.path}: {e}")
            if temp_path and temp_path.exists():
                logger.debug(f"Cleaning up temp file: {temp_path}")
                temp_path.unlink()
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

        logger.debug(f"Saved {len(tracks)} tracks to {self.path}")
