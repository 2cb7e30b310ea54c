"""Heading ids and heading levels of rendered pages."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator
from dataclasses import dataclass, field

from markdown_it.token import Token

_MAX_HEADING_LEVEL = 6


@dataclass(frozen=True)
class HeadingEntry:
    """A heading as it appears in the merged document."""

    level: int
    text: str
    id: str


@dataclass
class HeadingIdRegistry:
    """Heading ids already handed out in one export.

    Ids are unique across the whole merged document: a clash gets ``-1``,
    ``-2``... appended.
    """

    headings: list[HeadingEntry] = field(default_factory=list)
    _ids: set[str] = field(default_factory=set, init=False, repr=False)

    def __contains__(self, heading_id: str) -> bool:
        return heading_id in self._ids

    def claim(self, base_id: str) -> str:
        """Reserve ``base_id``, or the first free suffixed variant of it."""
        base_id = base_id or "section"
        heading_id = base_id
        index = 0
        while heading_id in self:
            index += 1
            heading_id = f"{base_id}-{index}"
        self._ids.add(heading_id)
        return heading_id

    def reserve(self, heading_id: str) -> None:
        """Mark an explicit id as taken."""
        self._ids.add(heading_id)


def slugify(text: str) -> str:
    """Turn heading text into an ASCII anchor token."""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    slug = re.sub(r"\s+", "-", normalized.strip().lower())
    slug = re.sub(r"[^a-z0-9_.\-]", "", slug)
    # anchors start with a letter
    slug = re.sub(r"^[^a-z]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.rstrip("-")


def iter_headings(tokens: list[Token]) -> Iterator[tuple[Token, Token, Token | None]]:
    """Yield ``(heading_open, heading_close, inline)`` token triples."""
    for index, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1] if tokens[index + 1].type == "inline" else None
        close = next(t for t in tokens[index + 1 :] if t.type == "heading_close")
        yield token, close, inline


def heading_text(inline: Token | None) -> str:
    """Plain text of a heading, markup and link targets stripped."""
    if inline is None or not inline.children:
        return ""
    return "".join(_plain_text(inline.children)).strip()


def _plain_text(tokens: list[Token]) -> Iterator[str]:
    for token in tokens:
        if token.type in ("text", "code_inline"):
            yield token.content
        elif token.type in ("softbreak", "hardbreak"):
            yield " "
        elif token.children:
            yield from _plain_text(token.children)


def offset_heading_levels(tokens: list[Token], offset: int) -> None:
    """Push headings of a nested page down by ``offset`` levels (max h6)."""
    if offset <= 0:
        return
    for heading_open, heading_close, _ in iter_headings(tokens):
        level = min(_MAX_HEADING_LEVEL, int(heading_open.tag[1:]) + offset)
        heading_open.tag = heading_close.tag = f"h{level}"


def assign_heading_ids(
    tokens: list[Token],
    page_name: str,
    registry: HeadingIdRegistry,
    record: bool = True,
) -> list[HeadingEntry]:
    """Give every heading of a page a document-wide unique id.

    The id is derived from ``<page name>-<heading text>``. Headings that
    already carry an id keep it.

    Args:
        tokens: Parsed page, modified in place.
        page_name: Page file name without extension.
        registry: Ids handed out so far in this export.
        record: Also append the headings to ``registry.headings``.

    Returns:
        The headings of the page, in order.
    """
    entries = []
    for heading_open, _, inline in iter_headings(tokens):
        text = heading_text(inline)
        existing = heading_open.attrGet("id")
        if existing is not None:
            heading_id = str(existing)
            registry.reserve(heading_id)
        else:
            heading_id = registry.claim(slugify(f"{page_name}-{text}"))
            heading_open.attrSet("id", heading_id)

        entries.append(HeadingEntry(level=int(heading_open.tag[1:]), text=text, id=heading_id))

    if record:
        registry.headings.extend(entries)
    return entries
