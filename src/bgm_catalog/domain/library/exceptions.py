"""Catalog exceptions for error handling."""


class CatalogError(Exception):
    """Base exception for catalog operations."""

    pass


class TrackNotFoundError(CatalogError):
    """Raised when no track matches the given id."""

    def __init__(self, track_id: str, message: str = None):
        self.track_id = track_id
        super().__init__(message or f"Track not found: {track_id}")


class PersistenceError(CatalogError):
    """Raised when the track collection cannot be read or written."""

    pass


class ValidationError(CatalogError):
    """Raised when track data fails validation (title/artist required)."""

    pass
