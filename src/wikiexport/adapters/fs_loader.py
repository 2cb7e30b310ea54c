"""Reads page markdown from the exported wiki on disk."""

from __future__ import annotations

from wikiexport.core.interfaces import ContentLoaderPort
from wikiexport.core.models import PageRecord


class FileContentLoader(ContentLoaderPort):
    """ContentLoaderPort reading UTF-8 page files (a BOM is tolerated)."""

    def load(self, page: PageRecord) -> str | None:
        """Read a page, or return None if its file does not exist.

        Manifests may name pages that were never created; those are
        skipped without a log line.
        """
        try:
            return page.path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            return None
