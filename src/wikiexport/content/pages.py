"""Wiki markdown quirks handled before and after parsing a page."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import unquote

import yaml
from markdown_it.token import Token

from wikiexport.content.toc import TOC_MARKER
from wikiexport.core.models import PageRecord

WIKI_TOC_TAG = "[[_TOC_]]"

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# ![alt](image.png =600x500), =600x or =x500
_IMAGE_SIZE = re.compile(r"\(([^()\s]+) =(\d*)x(\d*)\)")
_SIZE_TITLE = re.compile(r"^=(\d*)x(\d*)$")


def prepare_markdown(content: str, global_toc: bool = False, no_frontmatter: bool = False) -> str:
    """Rewrite wiki-specific syntax into something the parser understands.

    * ``[[_TOC_]]`` becomes ``[TOC]``, or disappears when the export has a
      global table of contents.
    * Image sizes are moved into the image title, see
      :func:`apply_image_sizes`.
    * Front matter is removed if requested.
    """
    content = content.replace(WIKI_TOC_TAG, "" if global_toc else TOC_MARKER)
    content = _IMAGE_SIZE.sub(_size_as_title, content)
    if no_frontmatter:
        content = _FRONT_MATTER.sub("", content, count=1)
    return content


def _size_as_title(match: re.Match[str]) -> str:
    url, width, height = match.groups()
    if not width and not height:
        return match.group(0)
    return f'({url} "={width}x{height}")'


def apply_image_sizes(tokens: list[Token]) -> None:
    """Turn size titles left by :func:`prepare_markdown` into attributes."""
    for token in tokens:
        if token.children:
            apply_image_sizes(token.children)
        if token.type != "image":
            continue
        size = _SIZE_TITLE.match(str(token.attrGet("title") or ""))
        if size is None:
            continue
        token.attrs.pop("title", None)
        width, height = size.groups()
        if width:
            token.attrSet("width", width)
        if height:
            token.attrSet("height", height)


def front_matter(content: str) -> dict[str, Any] | None:
    """Parse the YAML front matter of a page, if it has any."""
    match = _FRONT_MATTER.match(content)
    if match is None:
        return None
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return None
    return data if isinstance(data, dict) else None


def front_matter_tags(content: str) -> list[str]:
    """Front matter flattened to ``key:value`` tags.

    ``tags: [a, b]`` gives ``tags:a`` and ``tags:b``.
    """
    data = front_matter(content)
    if not data:
        return []

    tags = []
    for key, value in data.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item is not None:
                tags.append(f"{key}:{item}")
    return tags


def matches_filter(content: str, filter_tags: list[str]) -> bool:
    """True if the page carries one of the requested front matter tags."""
    if not filter_tags:
        return True
    wanted = {tag.lower() for tag in filter_tags}
    return any(tag.lower() in wanted for tag in front_matter_tags(content))


def page_title(page: PageRecord) -> str:
    """Human readable title of a page, from its file name.

    Wiki file names use ``-`` for spaces and url-encode other characters,
    so ``Getting-Started%3A-Setup`` reads ``Getting Started: Setup``.
    """
    return unquote(page.stem.replace("-", " "))


def page_path_label(page: PageRecord) -> str:
    """Decoded relative path of a page."""
    return unquote(page.relative_path)
