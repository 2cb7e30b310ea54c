"""Tests for domain models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from wikiexport.core.models import (
    PageRecord,
    ReferenceKind,
    ResolvedReference,
    ScanPolicy,
)


def make_page(**overrides: object) -> PageRecord:
    """Create a test page record."""
    fields: dict[str, object] = {
        "path": Path("/wiki/Section/Some-Page.md"),
        "relative_path": "/Section/Some-Page.md",
        "level": 1,
    }
    fields.update(overrides)
    return PageRecord(**fields)  # type: ignore[arg-type]


class TestPageRecord:
    """Tests for PageRecord."""

    def test_defaults(self) -> None:
        page = PageRecord(path=Path("/wiki/Home.md"), relative_path="/Home.md")
        assert page.level == 0
        assert page.section_path == "/"
        assert page.content is None

    def test_stem_and_directory(self) -> None:
        page = make_page()
        assert page.stem == "Some-Page"
        assert page.directory == Path("/wiki/Section")

    def test_negative_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_page(level=-1)

    def test_frozen(self) -> None:
        page = make_page()
        with pytest.raises(ValidationError):
            page.level = 3  # type: ignore[misc]

    def test_with_content_returns_copy(self) -> None:
        page = make_page()
        loaded = page.with_content("# Title")
        assert loaded.content == "# Title"
        assert page.content is None
        assert loaded.relative_path == page.relative_path
        assert loaded.level == page.level


class TestScanPolicy:
    """Tests for ScanPolicy enum."""

    def test_values(self) -> None:
        assert ScanPolicy.MANIFEST_ONLY.value == "manifest_only"
        assert ScanPolicy.DIRECTORY.value == "directory"
        assert ScanPolicy.SINGLE_FILE.value == "single_file"

    def test_from_string(self) -> None:
        assert ScanPolicy("directory") is ScanPolicy.DIRECTORY


class TestResolvedReference:
    """Tests for ResolvedReference."""

    def test_target_optional(self) -> None:
        ref = ResolvedReference(
            kind=ReferenceKind.EXTERNAL,
            original_url="https://example.com",
            url="https://example.com",
        )
        assert ref.target is None
        assert ref.kind == ReferenceKind.EXTERNAL
