"""Single page export: one page plus everything nested below it."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from wikiexport.core.errors import NotFoundError
from wikiexport.core.interfaces import LogSinkPort
from wikiexport.core.models import DOCUMENT_EXTENSION, PageRecord
from wikiexport.scanners.corpus import CorpusScanner
from wikiexport.scanners.excludes import ExcludeMatcher


class SingleFileScanner:
    """Selects one page of the wiki and its sub-pages.

    ``single_file`` is either a page file (``Some/Page.md``), exported on
    its own, or a fragment of a page path (``Some/Page``): the first
    manifest-listed page whose relative path contains it is exported
    together with the pages nested below it.
    """

    def __init__(
        self,
        single_file: str,
        export_dir: Path,
        sink: LogSinkPort,
        excludes: ExcludeMatcher | None = None,
    ) -> None:
        self._single_file = single_file
        self._export_dir = export_dir
        self._sink = sink
        self._excludes = excludes

    def scan(self) -> list[PageRecord]:
        """Return the requested page followed by its descendants.

        Raises:
            NotFoundError: If the page cannot be found.
        """
        if self._single_file.lower().endswith(DOCUMENT_EXTENSION):
            return [self._direct_page()]

        pages = CorpusScanner(self._export_dir, self._sink, self._excludes).scan()

        index = next(
            (i for i, page in enumerate(pages) if self._single_file in page.relative_path),
            None,
        )
        if index is None:
            self._sink.log(
                f"Single-File [-s] {self._single_file} specified not found", logging.ERROR
            )
            raise NotFoundError(f"{self._single_file} not found")

        current = pages[index]
        result = [current]
        for page in pages[index + 1 :]:
            if page.level <= current.level:
                break
            result.append(page)
        return result

    def _direct_page(self) -> PageRecord:
        path = Path(self._single_file)
        if not path.is_absolute():
            below_export = self._export_dir / path
            path = below_export if below_export.exists() else Path.cwd() / path
        path = Path(os.path.normpath(path))

        if not path.is_file():
            raise NotFoundError(f"{self._single_file} not found")

        relative = Path(os.path.relpath(path, self._export_dir)).as_posix()
        self._sink.log(f"Adding page: {path}", logging.INFO, 2)
        return PageRecord(path=path, relative_path=f"/{relative}", level=0, section_path="")
