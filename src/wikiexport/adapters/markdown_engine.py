"""markdown-it-py based parser and renderer."""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.token import Token

from wikiexport.core.interfaces import MarkdownEnginePort


def _keep_link(url: str) -> str:
    # wiki links must reach the resolver exactly as written
    return url


class MarkdownItEngine(MarkdownEnginePort):
    """CommonMark plus tables and strikethrough, raw HTML allowed."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])
        self._md.normalizeLink = _keep_link  # type: ignore[method-assign]

    def parse(self, markdown: str) -> list[Token]:
        """Parse markdown into block tokens with inline children."""
        return self._md.parse(markdown)

    def render(self, tokens: list[Token]) -> str:
        """Render tokens to an HTML fragment."""
        return self._md.renderer.render(tokens, self._md.options, {})
