"""BGM Catalog - mood and usage tagged background music with recommendations."""

__version__ = "0.1.0"
