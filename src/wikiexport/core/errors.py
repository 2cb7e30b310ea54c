"""Error hierarchy for wikiexport."""

from __future__ import annotations


class WikiExportError(Exception):
    """Base exception for all wikiexport errors."""

    pass


class ConfigError(WikiExportError):
    """Configuration loading or validation error."""

    pass


class NotFoundError(WikiExportError):
    """The export directory or a requested page does not exist.

    Always fatal: the export is aborted.
    """

    pass


class ExportError(WikiExportError):
    """The merged document could not be written."""

    pass
