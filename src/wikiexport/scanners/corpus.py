"""Corpus scanner: walks the wiki tree into an ordered, leveled page list."""

from __future__ import annotations

import logging
from pathlib import Path

from wikiexport.core.interfaces import LogSinkPort
from wikiexport.core.models import DOCUMENT_EXTENSION, PageRecord
from wikiexport.scanners.excludes import ExcludeMatcher
from wikiexport.scanners.manifest import read_manifest, reorder_by_manifest


class CorpusScanner:
    """Depth-first traversal of an exported wiki.

    Two policies share this traversal:

    * manifest-only (``include_unlisted=False``): only pages named in
      ``.order`` files are exported, and a directory is only entered when a
      manifest line names it.
    * directory (``include_unlisted=True``): every page on disk is exported.
      Pages named in the manifest come first, the rest follow in name order.
      A sub-directory named like a page is visited right after that page;
      the remaining sub-directories are visited after all pages.

    The resulting order is relied upon by existing exports and must not
    change.
    """

    def __init__(
        self,
        export_dir: Path,
        sink: LogSinkPort,
        excludes: ExcludeMatcher | None = None,
        include_unlisted: bool = False,
    ) -> None:
        self._export_dir = export_dir
        self._sink = sink
        self._excludes = excludes if excludes is not None else ExcludeMatcher()
        self._include_unlisted = include_unlisted

    def scan(self) -> list[PageRecord]:
        """Scan the whole export directory."""
        return self._scan_directory(self._export_dir, 0)

    def _scan_directory(self, directory: Path, level: int) -> list[PageRecord]:
        manifest = read_manifest(directory)

        if self._include_unlisted:
            self._log(f"Reading pages in directory {directory}")
            pages = _list_pages(directory)
            subdirectories = _list_subdirectories(directory)
            if manifest is not None:
                self._log("Order file found", logging.DEBUG, 1)
                pages = reorder_by_manifest(pages, manifest)
        else:
            self._log(f"Reading .order file in directory {directory}")
            if manifest is None:
                return []
            self._log("Order file found", logging.DEBUG, 1)
            pages = [directory / f"{name}{DOCUMENT_EXTENSION}" for name in manifest]
            subdirectories = []

        self._log(f"Pages: {len(pages)}", logging.INFO, 1)

        result: list[PageRecord] = []
        claimed: set[Path] = set()
        for page_path in pages:
            page = self._make_record(page_path, level)
            if self._excludes.matches(page):
                self._log(f"Skipping page: {page.path}", logging.INFO, 2)
            else:
                result.append(page)
                self._log(f"Adding page: {page.path}", logging.INFO, 2)

            child = self._child_directory(page_path, subdirectories, claimed)
            if child is not None:
                claimed.add(child)
                result.extend(self._scan_directory(child, level + 1))

        for subdirectory in subdirectories:
            if subdirectory not in claimed:
                result.extend(self._scan_directory(subdirectory, level + 1))

        return result

    def _child_directory(
        self, page_path: Path, subdirectories: list[Path], claimed: set[Path]
    ) -> Path | None:
        """Find the sub-directory holding the sub-pages of a page."""
        if not self._include_unlisted:
            candidate = page_path.parent / page_path.stem
            return candidate if candidate.is_dir() else None

        stem = page_path.stem.lower()
        for subdirectory in subdirectories:
            if subdirectory not in claimed and subdirectory.name.lower() == stem:
                return subdirectory
        return None

    def _make_record(self, page_path: Path, level: int) -> PageRecord:
        relative = page_path.relative_to(self._export_dir).as_posix()
        return PageRecord(
            path=page_path,
            relative_path=f"/{relative}",
            level=level,
            section_path="/",
        )

    def _log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
        self._sink.log(message, level, indent)


def _list_pages(directory: Path) -> list[Path]:
    pages = [
        entry
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() == DOCUMENT_EXTENSION
    ]
    return sorted(pages, key=lambda p: p.name)


def _list_subdirectories(directory: Path) -> list[Path]:
    subdirectories = [
        entry for entry in directory.iterdir() if entry.is_dir() and not entry.name.startswith(".")
    ]
    return sorted(subdirectories, key=lambda p: p.name)
