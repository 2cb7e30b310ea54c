"""Port interfaces for wikiexport (hexagonal architecture)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from markdown_it.token import Token

from wikiexport.core.models import PageRecord


class LogSinkPort(ABC):
    """Port for progress and warning messages emitted during an export."""

    @abstractmethod
    def log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
        """Emit a message.

        Args:
            message: Text to log.
            level: A ``logging`` level (``logging.INFO``, ``logging.WARNING``...).
            indent: Nesting depth used to visually group related lines.
        """


class ContentLoaderPort(ABC):
    """Port for reading raw page text."""

    @abstractmethod
    def load(self, page: PageRecord) -> str | None:
        """Read the markdown of a page.

        Args:
            page: The page to read.

        Returns:
            The page text, or None if the page file does not exist.
        """


class MarkdownEnginePort(ABC):
    """Port for the markdown parser and HTML renderer."""

    @abstractmethod
    def parse(self, markdown: str) -> list[Token]:
        """Parse markdown into a token stream that may be rewritten in place."""

    @abstractmethod
    def render(self, tokens: list[Token]) -> str:
        """Render a (possibly rewritten) token stream to HTML."""
