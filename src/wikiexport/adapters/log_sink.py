"""Log sink forwarding export progress to the standard logging module."""

from __future__ import annotations

import logging

from wikiexport.core.interfaces import LogSinkPort

_INDENT = "  "


class LoggingSink(LogSinkPort):
    """LogSinkPort writing to a ``logging.Logger``, indenting nested steps."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("wikiexport")

    def log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
        """Log ``message`` indented by ``indent`` levels."""
        self._logger.log(level, "%s%s", _INDENT * max(indent, 0), message)
