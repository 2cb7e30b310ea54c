"""Wiki exporter: scan, convert and merge all pages into one HTML document."""

from __future__ import annotations

import logging
import os
import time
from html import escape
from pathlib import Path

from wikiexport.container import Container
from wikiexport.content.headings import assign_heading_ids, offset_heading_levels
from wikiexport.content.links import LinkResolver, page_anchor
from wikiexport.content.pages import (
    apply_image_sizes,
    matches_filter,
    page_path_label,
    page_title,
    prepare_markdown,
)
from wikiexport.content.toc import create_global_toc, expand_toc_marker, remove_duplicated_headings
from wikiexport.context import ExportContext
from wikiexport.core.errors import ExportError
from wikiexport.core.models import DOCUMENT_EXTENSION, PageRecord, ScanPolicy
from wikiexport.config import ExportOptions
from wikiexport.scanners.corpus import CorpusScanner
from wikiexport.scanners.excludes import ExcludeMatcher
from wikiexport.scanners.single_file import SingleFileScanner
from wikiexport.wiki import ExportedWiki

_MAX_HEADING_LEVEL = 6

_DOCUMENT_TEMPLATE = (
    "<!DOCTYPE html><html><head>"
    '<meta http-equiv=Content-Type content="text/html; charset=utf-8">'
    "<title>{title}</title>"
    "</head><body>{body}</body></html>"
)


def scan_policy(options: ExportOptions) -> ScanPolicy:
    """Corpus selection policy requested by the options."""
    if options.single_file:
        return ScanPolicy.SINGLE_FILE
    if options.include_unlisted_pages:
        return ScanPolicy.DIRECTORY
    return ScanPolicy.MANIFEST_ONLY


def render_document(body: str, title: str) -> str:
    """Wrap the merged page HTML into a standalone document."""
    return _DOCUMENT_TEMPLATE.format(title=escape(title), body=body)


class WikiExporter:
    """Runs one export: wiki -> ordered pages -> merged HTML file.

    Steps: locate the wiki, scan the corpus, load page content, insert the
    optional global table of contents, convert every page (links rewritten,
    headings numbered) and write the merged document.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._options = container.options

    def export(self) -> Path:
        """Run the full export.

        Returns:
            Path of the written HTML document.

        Raises:
            NotFoundError: If the wiki or the requested page does not exist.
            ExportError: If the output cannot be written.
        """
        start = time.monotonic()

        wiki = self.locate_wiki()
        pages = self.load(self.scan(wiki))
        self._log(f"Found {len(pages)} total pages to process")

        context = ExportContext(wiki=wiki, options=self._options, sink=self._container.sink)
        pages, toc_index = self.with_global_toc(wiki, pages)
        body = self.convert(context, pages, toc_index)
        document = render_document(body, title=wiki.export_dir.name)

        output = Path(self._options.output).expanduser()
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(document, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Cannot write {output}: {e}") from e

        self._log(f"Export done in {time.monotonic() - start:.2f}s")
        return output

    def locate_wiki(self) -> ExportedWiki:
        """Find the export directory and its wiki root."""
        if self._options.path is None:
            self._log("Using current folder for export, -path is not set.")
            return ExportedWiki.locate(os.getcwd())
        return ExportedWiki.locate(self._options.path)

    def scan(self, wiki: ExportedWiki) -> list[PageRecord]:
        """Select the ordered pages of the export."""
        excludes = ExcludeMatcher(self._options.exclude_paths)
        sink = self._container.sink

        policy = scan_policy(self._options)
        if policy is ScanPolicy.SINGLE_FILE:
            scanner: CorpusScanner | SingleFileScanner = SingleFileScanner(
                self._options.single_file or "", wiki.export_dir, sink, excludes
            )
        else:
            scanner = CorpusScanner(
                wiki.export_dir,
                sink,
                excludes,
                include_unlisted=policy is ScanPolicy.DIRECTORY,
            )
        return scanner.scan()

    def load(self, pages: list[PageRecord]) -> list[PageRecord]:
        """Load page content; pages without a file are dropped."""
        loaded = []
        for page in pages:
            content = self._container.loader.load(page)
            if content is not None:
                loaded.append(page.with_content(content))
        return loaded

    def with_global_toc(
        self, wiki: ExportedWiki, pages: list[PageRecord]
    ) -> tuple[list[PageRecord], int | None]:
        """Insert the global table of contents page, if one is requested.

        Returns:
            The pages, and the index of the TOC page (None without TOC).
        """
        title = self._options.global_toc
        if not title:
            return pages, None

        lines = create_global_toc([page.content or "" for page in pages])
        if not lines:
            self._log("No headings found, no global table of contents", logging.INFO, 1)
            return pages, None

        position = min(self._options.global_toc_position, len(pages))
        if position < len(pages):
            directory = pages[position].directory
        else:
            directory = pages[-1].directory if pages else wiki.export_dir

        toc_page = PageRecord(
            path=directory / f"{title}{DOCUMENT_EXTENSION}",
            relative_path=f"/{title}{DOCUMENT_EXTENSION}",
            level=0,
            section_path="",
            content="\n".join(lines),
        )
        return [*pages[:position], toc_page, *pages[position:]], position

    def convert(
        self, context: ExportContext, pages: list[PageRecord], toc_index: int | None = None
    ) -> str:
        """Convert all pages to one HTML fragment.

        The TOC page is converted last so it can link to the headings of
        every other page, then put back in its place.
        """
        self._log("Converting Markdown to HTML")
        resolver = LinkResolver(context)

        parts: list[str] = []
        toc_slot: int | None = None
        for index, page in enumerate(pages):
            if index == toc_index:
                toc_slot = len(parts)
                parts.append("")
                continue
            html = self._convert_page(context, resolver, page, is_last=index == len(pages) - 1)
            if html is not None:
                parts.append(html)

        if toc_index is not None and toc_slot is not None:
            toc_html = self._convert_page(
                context,
                resolver,
                pages[toc_index],
                is_last=toc_index == len(pages) - 1,
                is_toc=True,
            )
            parts[toc_slot] = toc_html or ""

        return "".join(parts)

    def _convert_page(
        self,
        context: ExportContext,
        resolver: LinkResolver,
        page: PageRecord,
        is_last: bool,
        is_toc: bool = False,
    ) -> str | None:
        options = self._options
        engine = self._container.engine
        self._log(page.path.name, logging.INFO, 1)

        content = page.content or ""
        if not content.strip():
            self._log(f"File {page.path} is empty and will be skipped!", logging.WARNING, 1)
            return None

        if options.filter_tags and not is_toc:
            if not matches_filter(content, options.filter_tags):
                self._log("Page does not have correct tags - skip", logging.INFO, 3)
                return None
            self._log("Page tags match the provided filter", logging.INFO, 3)

        markdown = prepare_markdown(
            content,
            global_toc=bool(options.global_toc),
            no_frontmatter=options.no_frontmatter,
        )
        tokens = engine.parse(markdown)
        apply_image_sizes(tokens)
        offset_heading_levels(tokens, page.level)
        headings = assign_heading_ids(tokens, page.stem, context.headings, record=not is_toc)
        resolver.resolve(tokens, page)
        html = engine.render(tokens)

        if is_toc:
            html = expand_toc_marker(html, context.headings.headings)
            html = remove_duplicated_headings(html)
            self._log("Removed duplicated headers from toc html", logging.INFO, 1)
        else:
            html = expand_toc_marker(html, headings)

        anchor = page_anchor(page)
        self._log(f"Anchor: {anchor}", logging.INFO, 3)
        html = f'<a id="{escape(anchor)}">&nbsp;</a>{html}'

        if options.path_to_heading:
            html = f"<b>{escape(page_path_label(page))}</b>{html}"

        if is_toc and not options.heading:
            html = f"<h1>{escape(page.stem)}</h1>{html}"

        if options.heading:
            level = min(page.level + 1, _MAX_HEADING_LEVEL)
            html = f"<h{level}>{escape(page_title(page))}</h{level}>{html}"

        if options.break_page and not is_last:
            html = f"<div style='page-break-after: always;'>{html}</div>"

        self._log(f"html:\n{html}", logging.DEBUG, 1)
        return html

    def _log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
        self._container.sink.log(message, level, indent)
