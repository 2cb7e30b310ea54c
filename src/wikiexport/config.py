"""Configuration loading and validation for wikiexport."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wikiexport.core.errors import ConfigError

DEFAULT_OUTPUT = "export.html"

# Environment variable -> option name
_ENV_OVERRIDES = {
    "WIKIEXPORT_PATH": "path",
    "WIKIEXPORT_OUTPUT": "output",
    "WIKIEXPORT_ATTACHMENTS_PATH": "attachments_path",
}


class ExportOptions(BaseModel):
    """Options of one export run."""

    model_config = ConfigDict(frozen=True)

    path: str | None = Field(default=None, description="Wiki export directory (default: cwd)")
    output: str = Field(default=DEFAULT_OUTPUT, description="Merged HTML document to write")
    exclude_paths: list[str] = Field(
        default_factory=list,
        description="Regex fragments; pages whose path contains a match are skipped",
    )
    include_unlisted_pages: bool = Field(
        default=False, description="Also export pages not named in any .order file"
    )
    single_file: str | None = Field(
        default=None, description="Export only this page (and its sub-pages)"
    )
    global_toc: str | None = Field(default=None, description="Title of a global table of contents")
    global_toc_position: int = Field(default=0, ge=0, description="Page index of the global TOC")
    attachments_path: str | None = Field(
        default=None, description="Directory replacing the wiki's .attachments folder"
    )
    heading: bool = Field(default=False, description="Inject the page name as a heading")
    path_to_heading: bool = Field(default=False, description="Inject the page path above it")
    break_page: bool = Field(default=False, description="Page break after every page")
    no_frontmatter: bool = Field(default=False, description="Drop YAML front matter")
    filter: str | None = Field(
        default=None, description="Comma separated front matter tags (key:value) to keep"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("exclude_paths")
    @classmethod
    def validate_exclude_paths(cls, v: list[str]) -> list[str]:
        """Ensure every exclude pattern compiles."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid exclude pattern {pattern!r}: {e}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a standard logging level."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def filter_tags(self) -> list[str]:
        """Front matter tags requested by ``filter``."""
        if not self.filter:
            return []
        return [tag.strip() for tag in self.filter.split(",") if tag.strip()]


def load_config(
    path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> ExportOptions:
    """Build export options from an optional YAML file and overrides.

    Environment variable overrides:
        WIKIEXPORT_PATH: overrides path
        WIKIEXPORT_OUTPUT: overrides output
        WIKIEXPORT_ATTACHMENTS_PATH: overrides attachments_path

    Explicit ``overrides`` (typically CLI flags) win over both; keys whose
    value is None are ignored.

    Args:
        path: Path to a YAML config file. Optional.
        overrides: Option values taking precedence over file and environment.

    Returns:
        Validated ExportOptions.

    Raises:
        ConfigError: If the config file is missing, unreadable, or invalid.
    """
    data: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError("Config file must contain a YAML mapping")
        data.update(loaded or {})

    for env_name, option in _ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value:
            data[option] = env_value

    for option, value in (overrides or {}).items():
        if value is not None:
            data[option] = value

    try:
        return ExportOptions(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
