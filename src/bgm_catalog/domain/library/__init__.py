"""Library domain - the track catalog and its persistence.

This domain handles:
- Track data models and JSON representation
- The record store (create, update, delete, mark used)
- Catalog search, filtering and tag vocabularies
"""

# Models
from .models import Track, TrackData, utc_now

# Errors
from .exceptions import (
    CatalogError,
    PersistenceError,
    TrackNotFoundError,
    ValidationError,
)

# Persistence
from .storage import SCHEMA_VERSION, STORAGE_KEY, JsonFileStorage
from .store import TrackStore

# Browsing
from .filters import (
    MOOD_SUGGESTIONS,
    USAGE_SUGGESTIONS,
    collect_tags,
    filter_tracks,
    matches_search,
    normalize_tag_input,
    tag_vocabulary,
)

__all__ = [
    # Models
    "Track",
    "TrackData",
    "utc_now",
    # Errors
    "CatalogError",
    "PersistenceError",
    "TrackNotFoundError",
    "ValidationError",
    # Persistence
    "SCHEMA_VERSION",
    "STORAGE_KEY",
    "JsonFileStorage",
    "TrackStore",
    # Browsing
    "MOOD_SUGGESTIONS",
    "USAGE_SUGGESTIONS",
    "collect_tags",
    "filter_tracks",
    "matches_search",
    "normalize_tag_input",
    "tag_vocabulary",
]
