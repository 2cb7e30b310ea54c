"""Per-export state shared by the conversion steps."""

from __future__ import annotations

from dataclasses import dataclass, field

from wikiexport.config import ExportOptions
from wikiexport.content.headings import HeadingIdRegistry
from wikiexport.core.interfaces import LogSinkPort
from wikiexport.wiki import ExportedWiki


@dataclass
class ExportContext:
    """Everything one export run needs besides the pages themselves.

    A fresh context is created for every export; nothing here outlives it.
    """

    wiki: ExportedWiki
    options: ExportOptions
    sink: LogSinkPort
    headings: HeadingIdRegistry = field(default_factory=HeadingIdRegistry)
