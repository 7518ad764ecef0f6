"""
Configuration management for BGM Catalog
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class StorageConfig:
    """Configuration for the persisted track collection."""

    data_file: Optional[str] = None  # Default: ~/.local/share/bgm-catalog/bgm_tracks.json


@dataclass
class RecommendationConfig:
    """Configuration for the recommendation engine."""

    cooldown_days: int = 7
    affinity_window_days: int = 30
    top_k: int = 3

    def validate(self) -> None:
        """Validate recommendation window values.

        Raises:
            ValueError: If any value is not a positive integer
        """
        for name in ("cooldown_days", "affinity_window_days", "top_k"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/bgm-catalog/bgm-catalog.log)
    )
    console_output: bool = False  # Also output to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "bgm-catalog"
    return Path.home() / ".config" / "bgm-catalog"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/bgm-catalog (or ~/.config/bgm-catalog)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "bgm-catalog"
    return Path.home() / ".local" / "share" / "bgm-catalog"


def get_data_file(config: Config) -> Path:
    """Resolve where the track collection lives for a given configuration."""
    if config.storage.data_file:
        return Path(config.storage.data_file).expanduser()
    return get_data_dir() / "bgm_tracks.json"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# BGM Catalog Configuration

[storage]
# Location of the track collection (JSON)
# data_file = "~/.local/share/bgm-catalog/bgm_tracks.json"

[recommendation]
# Tracks used within this many days are not recommended
cooldown_days = 7

# Tags of tracks used within this many days shape recommendations
affinity_window_days = 30

# Pick randomly among this many best-scoring tracks
top_k = 3

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/bgm-catalog/bgm-catalog.log)
# log_file = "/path/to/custom/bgm-catalog.log"

# Also output logs to stderr (useful for debugging)
console_output = false
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "storage" in toml_data:
        storage_data = toml_data["storage"]
        data_file = storage_data.get("data_file")
        if data_file:
            data_file = str(Path(data_file).expanduser())
        config.storage = StorageConfig(data_file=data_file)

    if "recommendation" in toml_data:
        rec_data = toml_data["recommendation"]
        config.recommendation = RecommendationConfig(
            cooldown_days=rec_data.get(
                "cooldown_days", config.recommendation.cooldown_days
            ),
            affinity_window_days=rec_data.get(
                "affinity_window_days", config.recommendation.affinity_window_days
            ),
            top_k=rec_data.get("top_k", config.recommendation.top_k),
        )
        try:
            config.recommendation.validate()
        except ValueError as e:
            print(f"Warning: Invalid recommendation configuration: {e}")
            print("Using default recommendation configuration.")
            config.recommendation = RecommendationConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    # Environment override for the data file
    env_data_file = os.environ.get("BGM_CATALOG_DATA_FILE")
    if env_data_file:
        config.storage.data_file = str(Path(env_data_file).expanduser())

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - BGM_CATALOG_DATA_FILE
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        return parse_config({})

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return parse_config({})

    return parse_config(toml_data)
