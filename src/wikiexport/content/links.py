"""Link and image rewriting for the merged document.

Every reference in a page is resolved against the filesystem:

* links to other pages become ``#anchor`` links into the merged document,
* local images and other files are embedded as base64 ``data:`` URIs so
  rendering never needs access to the wiki directory,
* anything that cannot be resolved is left alone and reported.
"""

from __future__ import annotations

import base64
import logging
import os
import re
from collections.abc import Iterator, Sequence
from pathlib import Path
from urllib.parse import unquote

from markdown_it.token import Token

from wikiexport.context import ExportContext
from wikiexport.core.models import (
    ATTACHMENTS_DIR_NAME,
    DOCUMENT_EXTENSION,
    PageRecord,
    ReferenceKind,
    ResolvedReference,
)

# Token type -> attribute holding its URL
_URL_ATTRIBUTES = {"link_open": "href", "image": "src"}

# Applied in order to root-relative URLs to match wiki file names on disk
_ROOT_URL_REPLACEMENTS = ((":", "%3A"), ("#", "-"), ("%20", " "))

_ATTACHMENTS_PREFIXES = (f"/{ATTACHMENTS_DIR_NAME}", ATTACHMENTS_DIR_NAME)

# Any URL scheme except single letters (drive letters)
_URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]+:")

_SEPARATORS = re.compile(r"[\\/]")


def iter_tokens(tokens: list[Token]) -> Iterator[Token]:
    """Walk a token stream depth-first, including inline and label children."""
    for token in tokens:
        yield token
        if token.children:
            yield from iter_tokens(token.children)


def merged_document_anchor(
    section_path: str,
    url: str,
    subtree_prefix: Sequence[str] = (),
) -> str:
    """Anchor of a page inside the merged document.

    ``/Another-Page/Sub-Page1.md`` becomes ``another-pagesub-page1``. When
    only a sub-tree of the wiki is exported, links are written relative to
    the wiki root while pages are relative to the sub-tree, so the sub-tree
    prefix is dropped from the link path.

    Args:
        section_path: Section-grouping path of the page holding the link.
        url: Link target as written (any ``#fragment`` is ignored).
        subtree_prefix: Path segments of the export directory below the
            wiki root.
    """
    path = f"{section_path}/{url}".split("#", 1)[0]
    segments = [segment for segment in _SEPARATORS.split(path) if segment and segment != "."]

    prefix = [segment.lower() for segment in subtree_prefix]
    if prefix and [segment.lower() for segment in segments[: len(prefix)]] == prefix:
        segments = segments[len(prefix) :]

    anchor = "".join(segments).lower()
    if anchor.endswith(DOCUMENT_EXTENSION):
        anchor = anchor[: -len(DOCUMENT_EXTENSION)]
    return anchor


def page_anchor(page: PageRecord) -> str:
    """Anchor a page is reachable under in the merged document."""
    return merged_document_anchor("", page.relative_path)


def data_uri(path: Path) -> str:
    """Embed a file as a base64 image data URI."""
    extension = path.suffix.lower().lstrip(".")
    mime_type = "image/svg+xml" if extension == "svg" else f"image/{extension}"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class LinkResolver:
    """Rewrites the link and image URLs of parsed pages in place."""

    def __init__(self, context: ExportContext) -> None:
        self._context = context

    def resolve(self, tokens: list[Token], page: PageRecord) -> list[ResolvedReference]:
        """Resolve every reference of a parsed page.

        Args:
            tokens: Parsed page, modified in place.
            page: The page the tokens belong to.

        Returns:
            One entry per link or image, in document order.
        """
        self._log("Correcting Links and Images", logging.INFO, 2)

        references = []
        for token in iter_tokens(tokens):
            attribute = _URL_ATTRIBUTES.get(token.type)
            if attribute is None:
                continue
            url = token.attrGet(attribute)
            if not url:
                continue

            reference = self.resolve_url(str(url), page)
            if reference.url != url:
                token.attrSet(attribute, reference.url)
            references.append(reference)
        return references

    def resolve_url(self, url: str, page: PageRecord) -> ResolvedReference:
        """Resolve a single URL found in ``page``."""
        if url.startswith("data:"):
            return ResolvedReference(kind=ReferenceKind.DATA_URI, original_url=url, url=url)
        if url.startswith("#"):
            return ResolvedReference(kind=ReferenceKind.FRAGMENT, original_url=url, url=url)
        if url.startswith("http") or _URL_SCHEME.match(url):
            return ResolvedReference(kind=ReferenceKind.EXTERNAL, original_url=url, url=url)

        target = self._target_path(url, page)

        if target.is_file() and target.suffix.lower() == DOCUMENT_EXTENSION:
            return self._document_reference(url, page, target)

        if target.is_file():
            try:
                embedded = data_uri(target)
            except OSError as e:
                self._log(f"Cannot embed '{target}': {e}", logging.WARNING, 2)
                return ResolvedReference(
                    kind=ReferenceKind.UNRESOLVED, original_url=url, url=url, target=target
                )
            return ResolvedReference(
                kind=ReferenceKind.EMBEDDED, original_url=url, url=embedded, target=target
            )

        # the filesystem root has no name to extend
        if target.name:
            with_extension = target.with_name(target.name + DOCUMENT_EXTENSION)
            if with_extension.is_file():
                return self._document_reference(url, page, with_extension)

        self._log(f"Invalid link '{target}'", logging.WARNING, 2)
        return ResolvedReference(
            kind=ReferenceKind.UNRESOLVED, original_url=url, url=url, target=target
        )

    def _target_path(self, url: str, page: PageRecord) -> Path:
        """Filesystem path a URL points at."""
        attachments_path = self._context.options.attachments_path
        if attachments_path and url.startswith(_ATTACHMENTS_PREFIXES):
            # attachment names may be url-encoded (spaces etc.)
            name = unquote(url.split("/")[-1])
            return _normalize(Path(attachments_path) / name)

        if url.startswith("/"):
            for old, new in _ROOT_URL_REPLACEMENTS:
                url = url.replace(old, new)
            return _normalize(self._context.wiki.base_dir / url.lstrip("/"))

        return _normalize(page.directory / url.split("#", 1)[0])

    def _document_reference(self, url: str, page: PageRecord, target: Path) -> ResolvedReference:
        anchor = merged_document_anchor(page.section_path, url, self._context.wiki.subtree_prefix)
        self._log(f"Markdown link: {anchor}", logging.DEBUG, 2)
        return ResolvedReference(
            kind=ReferenceKind.DOCUMENT, original_url=url, url=f"#{anchor}", target=target
        )

    def _log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
        self._context.sink.log(message, level, indent)


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(path)))
