"""Shared test fixtures for wikiexport."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from wikiexport.config import ExportOptions
from wikiexport.context import ExportContext
from wikiexport.core.interfaces import LogSinkPort
from wikiexport.wiki import ExportedWiki

# PNG signature followed by filler; only the bytes matter for embedding
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


def write_page(root: Path, relative: str, content: str = "") -> Path:
    """Create a page (and its parent directories) below ``root``."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_order(directory: Path, *names: str) -> Path:
    """Create a ``.order`` manifest listing ``names``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / ".order"
    path.write_text("\n".join(names) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def sink() -> MagicMock:
    """Mock log sink recording every message."""
    return MagicMock(spec=LogSinkPort)


@pytest.fixture()
def sectioned_wiki(tmp_path: Path) -> Path:
    """Wiki with mentioned, unmentioned and page-less sections.

    Layout::

        .order                      Mentioned-Section, Mentioned-Section-No-Home
        Mentioned-Section.md
        Start-Page.md
        Mentioned-Section/In-Mentioned-Section.md
        Mentioned-Section-No-Home/In-Mentioned-Section-No-Home.md
        Unmentioned-Section/In-Unmentioned-Section.md
    """
    root = tmp_path / "wiki"
    write_page(root, "Mentioned-Section.md", "# Mentioned\n")
    write_page(root, "Start-Page.md", "# Start\n")
    write_page(root, "Mentioned-Section/In-Mentioned-Section.md", "# In mentioned\n")
    write_page(
        root,
        "Mentioned-Section-No-Home/In-Mentioned-Section-No-Home.md",
        "# In mentioned no home\n",
    )
    write_page(root, "Unmentioned-Section/In-Unmentioned-Section.md", "# In unmentioned\n")
    write_order(root, "Mentioned-Section", "Mentioned-Section-No-Home")
    return root


@pytest.fixture()
def project_wiki(tmp_path: Path) -> Path:
    """Wiki with attachments, nested pages and cross links.

    Layout::

        .attachments/diagram.png
        .order                      Home, Guide
        Home.md
        Guide.md
        Guide/.order                Setup
        Guide/Setup.md
    """
    root = tmp_path / "Project.wiki"
    (root / ".attachments").mkdir(parents=True)
    (root / ".attachments" / "diagram.png").write_bytes(PNG_BYTES)

    write_page(
        root,
        "Home.md",
        "# Welcome\n\n"
        "See the [guide](/Guide) and [setup](/Guide/Setup.md).\n\n"
        "![diagram](/.attachments/diagram.png)\n\n"
        "Visit [the site](https://example.com).\n",
    )
    write_page(root, "Guide.md", "# Guide\n\nRead [setup](./Guide/Setup.md) first.\n")
    write_page(
        root,
        "Guide/Setup.md",
        "# Setup\n\n## Install\n\n```\n# not a heading\n```\n\nBack [home](/Home).\n",
    )
    write_order(root, "Home", "Guide")
    write_order(root / "Guide", "Setup")
    return root


@pytest.fixture()
def make_context():
    """Factory for export contexts on a wiki directory."""

    def _make(
        export_dir: Path, sink: LogSinkPort | None = None, **options: object
    ) -> ExportContext:
        return ExportContext(
            wiki=ExportedWiki.locate(export_dir),
            options=ExportOptions(**options),
            sink=sink or MagicMock(spec=LogSinkPort),
        )

    return _make
