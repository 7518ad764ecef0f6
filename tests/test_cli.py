"""Tests for the bgm-catalog command-line interface."""

from pathlib import Path

import pytest
from loguru import logger

from bgm_catalog.cli import build_parser, run
from bgm_catalog.core.config import Config, LoggingConfig, StorageConfig
from bgm_catalog.domain.library import JsonFileStorage, TrackStore


@pytest.fixture
def cli_config(tmp_path: Path) -> Config:
    return Config(
        storage=StorageConfig(data_file=str(tmp_path / "tracks.json")),
        logging=LoggingConfig(log_file=str(tmp_path / "cli.log")),
    )


@pytest.fixture
def cli_store(cli_config: Config) -> TrackStore:
    return TrackStore(JsonFileStorage(Path(cli_config.storage.data_file)))


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()


def _add(config: Config, *extra: str) -> int:
    return run(["add", "--title", "Tide", "--artist", "Harbor", *extra], config=config)


class TestParser:
    """Tests for argument parsing."""

    def test_subcommand_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_add_requires_title(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add", "--artist", "x"])

    def test_edit_favorite_tristate(self) -> None:
        parser = build_parser()
        assert parser.parse_args(["edit", "id1"]).favorite is None
        assert parser.parse_args(["edit", "id1", "--no-favorite"]).favorite is False


class TestCommands:
    """Tests for running commands against a temporary collection."""

    def test_add_and_list(self, cli_config: Config, cli_store: TrackStore, capsys) -> None:
        assert _add(cli_config, "--mood", " Calm ", "--mood", "Sea", "--usage", "Story") == 0

        tracks = cli_store.list_tracks()
        assert len(tracks) == 1
        assert tracks[0].mood_tags == ("Calm", "Sea")
        assert tracks[0].usage_tags == ("Story",)

        capsys.readouterr()
        assert run(["list", "--mood", "Calm"], config=cli_config) == 0
        assert "No tracks found" not in capsys.readouterr().out

        assert run(["list", "--mood", "Night"], config=cli_config) == 0
        assert "No tracks found" in capsys.readouterr().out

    def test_add_rejects_blank_title(self, cli_config: Config, cli_store: TrackStore, capsys) -> None:
        code = run(["add", "--title", "  ", "--artist", "x"], config=cli_config)
        assert code == 1
        assert cli_store.list_tracks() == []
        assert "required" in capsys.readouterr().err

    def test_edit_keeps_unspecified_fields(
        self, cli_config: Config, cli_store: TrackStore
    ) -> None:
        _add(cli_config, "--mood", "Calm", "--notes", "keep me")
        track_id = cli_store.list_tracks()[0].id

        assert run(["edit", track_id, "--title", "Low Tide", "--favorite"], config=cli_config) == 0

        track = cli_store.get_track(track_id)
        assert track.title == "Low Tide"
        assert track.artist == "Harbor"
        assert track.mood_tags == ("Calm",)
        assert track.notes == "keep me"
        assert track.favorite is True

    def test_use_and_favorite(self, cli_config: Config, cli_store: TrackStore) -> None:
        _add(cli_config)
        track_id = cli_store.list_tracks()[0].id

        assert run(["use", track_id], config=cli_config) == 0
        assert run(["favorite", track_id], config=cli_config) == 0

        track = cli_store.get_track(track_id)
        assert track.used_count == 1
        assert track.favorite is True

    def test_unknown_id_exits_with_error(self, cli_config: Config, capsys) -> None:
        assert run(["use", "missing-id"], config=cli_config) == 1
        assert "missing-id" in capsys.readouterr().err

    def test_corrupt_collection_exits_with_error(self, cli_config: Config, capsys) -> None:
        Path(cli_config.storage.data_file).write_text(
            '{"schemaVersion": 1, "tracks": [null]}', encoding="utf-8"
        )
        assert run(["list"], config=cli_config) == 1
        assert "Error:" in capsys.readouterr().err

    def test_recommend_explain_fallback(self, cli_config: Config, cli_store: TrackStore, capsys) -> None:
        """With every track in cooldown the explanation reports the fallback."""
        _add(cli_config)
        cli_store.mark_used(cli_store.list_tracks()[0].id)
        capsys.readouterr()

        assert run(["recommend", "--explain", "--seed", "1"], config=cli_config) == 0
        out = capsys.readouterr().out
        assert "picking from the whole catalog" in out
        assert "Recommended" in out

    def test_delete_is_idempotent(self, cli_config: Config, cli_store: TrackStore) -> None:
        _add(cli_config)
        track_id = cli_store.list_tracks()[0].id

        assert run(["delete", track_id], config=cli_config) == 0
        assert run(["delete", track_id], config=cli_config) == 0
        assert cli_store.list_tracks() == []

    def test_recommend_empty(self, cli_config: Config, capsys) -> None:
        assert run(["recommend"], config=cli_config) == 0
        assert "No tracks yet" in capsys.readouterr().out

    def test_recommend_and_use(self, cli_config: Config, cli_store: TrackStore, capsys) -> None:
        _add(cli_config, "--mood", "Calm")

        code = run(["recommend", "--seed", "7", "--explain", "--use"], config=cli_config)

        assert code == 0
        assert "Recommended" in capsys.readouterr().out
        assert cli_store.list_tracks()[0].used_count == 1

    def test_data_file_option(self, cli_config: Config, tmp_path: Path) -> None:
        other = tmp_path / "other.json"
        assert run(
            ["--data-file", str(other), "add", "--title", "A", "--artist", "B"],
            config=cli_config,
        ) == 0
        assert len(JsonFileStorage(other).load_tracks()) == 1

    def test_tags_lists_custom_tags(self, cli_config: Config, capsys) -> None:
        _add(cli_config, "--mood", "Rainy")
        capsys.readouterr()

        assert run(["tags"], config=cli_config) == 0
        out = capsys.readouterr().out
        assert "Rainy" in out
        assert "Soft Morning" in out
