"""Domain models for wikiexport."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DOCUMENT_EXTENSION = ".md"
"""Extension of wiki pages."""

ORDER_FILE_NAME = ".order"
"""Per-directory page order manifest."""

ATTACHMENTS_DIR_NAME = ".attachments"
"""Directory marking the root of a wiki export."""


class ScanPolicy(str, Enum):
    """How the corpus of pages is selected."""

    MANIFEST_ONLY = "manifest_only"
    DIRECTORY = "directory"
    SINGLE_FILE = "single_file"


class PageRecord(BaseModel):
    """One page of the corpus.

    Records are immutable; loading content produces a new record via
    :meth:`with_content`.
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Absolute path of the page file")
    relative_path: str = Field(
        description="Forward-slash path below the export directory, with leading '/'"
    )
    level: int = Field(default=0, ge=0, description="Nesting depth in the wiki tree")
    section_path: str = Field(
        default="/", description="Section-grouping path used for merged-document anchors"
    )
    content: str | None = Field(default=None, description="Raw markdown, once loaded")

    @property
    def stem(self) -> str:
        """Page name without the document extension."""
        return self.path.stem

    @property
    def directory(self) -> Path:
        """Directory holding the page file."""
        return self.path.parent

    def with_content(self, content: str) -> PageRecord:
        """Return a copy of this record carrying the given content."""
        return self.model_copy(update={"content": content})


class ReferenceKind(str, Enum):
    """Outcome of resolving one link or image reference."""

    EXTERNAL = "external"
    FRAGMENT = "fragment"
    DATA_URI = "data_uri"
    DOCUMENT = "document"
    EMBEDDED = "embedded"
    UNRESOLVED = "unresolved"


class ResolvedReference(BaseModel):
    """A reference found in page content and what became of it."""

    kind: ReferenceKind = Field(description="Resolution outcome")
    original_url: str = Field(description="URL as written in the page")
    url: str = Field(description="URL after rewriting")
    target: Path | None = Field(default=None, description="Filesystem path it resolved to")
