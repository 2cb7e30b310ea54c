"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from wikiexport.config import DEFAULT_OUTPUT, ExportOptions, load_config
from wikiexport.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep WIKIEXPORT_* variables of the outer environment out of the tests."""
    for name in ("WIKIEXPORT_PATH", "WIKIEXPORT_OUTPUT", "WIKIEXPORT_ATTACHMENTS_PATH"):
        monkeypatch.delenv(name, raising=False)


def write_config(path: Path, data: object) -> Path:
    """Write config data to a YAML file."""
    config_file = path / "wikiexport.yaml"
    config_file.write_text(yaml.dump(data))
    return config_file


class TestExportOptions:
    """Tests for ExportOptions validation."""

    def test_defaults(self) -> None:
        options = ExportOptions()
        assert options.path is None
        assert options.output == DEFAULT_OUTPUT
        assert options.exclude_paths == []
        assert options.include_unlisted_pages is False
        assert options.global_toc_position == 0
        assert options.log_level == "INFO"

    def test_invalid_exclude_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid exclude pattern"):
            ExportOptions(exclude_paths=["(unclosed"])

    def test_negative_toc_position_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExportOptions(global_toc_position=-1)

    def test_log_level_normalized(self) -> None:
        assert ExportOptions(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            ExportOptions(log_level="LOUD")

    def test_filter_tags_split_and_stripped(self) -> None:
        options = ExportOptions(filter="tag:a, owner:me ,,")
        assert options.filter_tags == ["tag:a", "owner:me"]

    def test_filter_tags_empty_without_filter(self) -> None:
        assert ExportOptions().filter_tags == []


class TestLoadConfig:
    """Tests for load_config()."""

    def test_no_file_gives_defaults(self) -> None:
        assert load_config() == ExportOptions()

    def test_loads_valid_config(self, tmp_path: Path) -> None:
        config_file = write_config(
            tmp_path,
            {"path": "/wiki", "exclude_paths": ["Drafts"], "heading": True},
        )
        options = load_config(str(config_file))

        assert options.path == "/wiki"
        assert options.exclude_paths == ["Drafts"]
        assert options.heading is True

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == ExportOptions()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("path: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, ["a", "b"])
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(str(config_file))

    def test_invalid_values_raise_config_error(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, {"global_toc_position": -3})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(str(config_file))

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = write_config(tmp_path, {"path": "/from-file", "output": "file.html"})
        monkeypatch.setenv("WIKIEXPORT_PATH", "/from-env")

        options = load_config(str(config_file))

        assert options.path == "/from-env"
        assert options.output == "file.html"

    def test_overrides_win_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WIKIEXPORT_OUTPUT", "env.html")
        options = load_config(overrides={"output": "cli.html"})
        assert options.output == "cli.html"

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, {"global_toc": "Contents"})
        options = load_config(str(config_file), {"global_toc": None, "heading": None})
        assert options.global_toc == "Contents"
        assert options.heading is False

    def test_attachments_path_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WIKIEXPORT_ATTACHMENTS_PATH", "/attachments")
        assert load_config().attachments_path == "/attachments"
