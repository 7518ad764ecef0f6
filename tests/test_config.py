"""Tests for configuration loading."""

import tomllib
from pathlib import Path

import pytest

from bgm_catalog.core import config as config_module
from bgm_catalog.core.config import (
    Config,
    RecommendationConfig,
    create_default_config,
    get_data_file,
    load_config,
    parse_config,
)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG dirs at tmp_path and clear env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("BGM_CATALOG_DATA_FILE", raising=False)
    return tmp_path


class TestParseConfig:
    """Tests for building Config from TOML data."""

    def test_defaults(self) -> None:
        config = parse_config({})
        assert config.recommendation == RecommendationConfig(7, 30, 3)
        assert config.storage.data_file is None
        assert config.logging.level == "INFO"

    def test_default_file_parses_to_defaults(self) -> None:
        toml_data = tomllib.loads(create_default_config())
        assert parse_config(toml_data) == Config()

    def test_recommendation_section(self) -> None:
        config = parse_config(
            {"recommendation": {"cooldown_days": 3, "top_k": 5}}
        )
        assert config.recommendation.cooldown_days == 3
        assert config.recommendation.affinity_window_days == 30
        assert config.recommendation.top_k == 5

    def test_invalid_recommendation_falls_back(self) -> None:
        config = parse_config({"recommendation": {"top_k": 0}})
        assert config.recommendation == RecommendationConfig()

    def test_logging_level_uppercased(self) -> None:
        assert parse_config({"logging": {"level": "debug"}}).logging.level == "DEBUG"

    def test_env_overrides_data_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("BGM_CATALOG_DATA_FILE", str(target))
        config = parse_config({"storage": {"data_file": "/ignored.json"}})
        assert get_data_file(config) == target


class TestGetDataFile:
    """Tests for resolving the collection path."""

    def test_default_under_data_dir(self, isolated_dirs: Path) -> None:
        expected = isolated_dirs / "data" / "bgm-catalog" / "bgm_tracks.json"
        assert get_data_file(Config()) == expected

    def test_configured_path(self, tmp_path: Path) -> None:
        config = parse_config({"storage": {"data_file": str(tmp_path / "x.json")}})
        assert get_data_file(config) == tmp_path / "x.json"


class TestLoadConfig:
    """Tests for reading config.toml from disk."""

    def test_reads_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_path = tmp_path / "config.toml"
        config_path.write_text("[recommendation]\ncooldown_days = 10\n", encoding="utf-8")
        monkeypatch.setattr(config_module, "get_config_path", lambda: config_path)

        assert load_config().recommendation.cooldown_days == 10

    def test_creates_default_when_missing(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_path = tmp_path / "new" / "config.toml"
        monkeypatch.setattr(config_module, "get_config_path", lambda: config_path)

        assert load_config() == Config()
        assert config_path.exists()

    def test_invalid_toml_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_path = tmp_path / "config.toml"
        config_path.write_text("[recommendation\n", encoding="utf-8")
        monkeypatch.setattr(config_module, "get_config_path", lambda: config_path)

        assert load_config() == Config()
