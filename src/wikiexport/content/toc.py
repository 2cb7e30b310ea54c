"""Global table of contents across all pages of an export.

Headings and code fences are detected with regular expressions, not with
a markdown parser. Exports depend on exactly this approximation.
"""

from __future__ import annotations

import re
from html import escape

from wikiexport.content.headings import HeadingEntry

TOC_MARKER = "[TOC]"

_RENDERED_TOC_MARKER = f"<p>{TOC_MARKER}</p>"

# A fence opens at the start of a line and runs to the next fence token,
# wherever it is; an unterminated fence runs to the end of the text.
_CODE_FENCE = re.compile(r"^[ \t]*(?:```|~~~)(?:[\s\S]*?(?:```|~~~)|[\s\S]*\Z)", re.MULTILINE)

# 1-6 hashes, an optional space, then something other than another hash
_MARKDOWN_HEADING = re.compile(r"^ *#{1,6} ?[^#].*$", re.MULTILINE)

# A line holding only an html heading; open and close levels may differ
_HTML_HEADING_LINE = re.compile(r"^ *<h[1-6].*>.*</h[1-6]> *$")

_NAV_OPEN = re.compile(r"<nav\b", re.IGNORECASE)
_NAV_CLOSE = re.compile(r"</nav>", re.IGNORECASE)


def strip_code_fences(content: str) -> str:
    """Remove fenced code regions from markdown text."""
    return _CODE_FENCE.sub("", content)


def extract_headings(content: str) -> list[str]:
    """Markdown heading lines of a page, code fences excluded."""
    text = strip_code_fences(content)
    return [match.group(0).strip() for match in _MARKDOWN_HEADING.finditer(text)]


def create_global_toc(contents: list[str]) -> list[str]:
    """Build the lines of the global TOC page.

    Args:
        contents: Raw markdown of every page, in export order.

    Returns:
        ``["[TOC]", *headings]``, or an empty list when no page has a
        heading.
    """
    headings: list[str] = []
    for content in contents:
        headings.extend(extract_headings(content))

    if not headings:
        return []
    return [TOC_MARKER, *headings]


def remove_duplicated_headings(html: str) -> str:
    """Drop heading lines from the rendered global TOC page.

    The TOC page repeats every heading of the export; once the TOC
    navigation is rendered those repeated headings are removed. Lines
    inside ``<nav>`` are kept.
    """
    kept: list[str] = []
    nav_depth = 0
    for line in html.split("\n"):
        opens = len(_NAV_OPEN.findall(line))
        in_nav = nav_depth > 0 or opens > 0
        nav_depth = max(0, nav_depth + opens - len(_NAV_CLOSE.findall(line)))

        if not in_nav and _HTML_HEADING_LINE.match(line):
            continue
        kept.append(line)

    return "\n".join(kept).strip("\n")


def render_toc_nav(headings: list[HeadingEntry]) -> str:
    """Navigation list linking to the given headings."""
    lines = ['<nav class="toc">', "<ul>"]
    for heading in headings:
        lines.append(
            f'<li class="toc-h{heading.level}">'
            f'<a href="#{escape(heading.id)}">{escape(heading.text)}</a></li>'
        )
    lines.extend(["</ul>", "</nav>"])
    return "\n".join(lines)


def expand_toc_marker(html: str, headings: list[HeadingEntry]) -> str:
    """Replace the rendered ``[TOC]`` paragraph with a navigation list."""
    if _RENDERED_TOC_MARKER not in html:
        return html
    return html.replace(_RENDERED_TOC_MARKER, render_toc_nav(headings))
