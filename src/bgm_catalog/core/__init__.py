"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging setup (Loguru)
- Console management (Rich)
"""

# Configuration
from .config import (
    Config,
    LoggingConfig,
    RecommendationConfig,
    StorageConfig,
    load_config,
    parse_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_data_file,
    create_default_config,
)

# Logging
from .output import setup_loguru, setup_from_config

# Console
from .console import get_console, get_err_console, print_error, safe_print

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "RecommendationConfig",
    "StorageConfig",
    "load_config",
    "parse_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_data_file",
    "create_default_config",
    # Logging
    "setup_loguru",
    "setup_from_config",
    # Console
    "get_console",
    "get_err_console",
    "print_error",
    "safe_print",
]
