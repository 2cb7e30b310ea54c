"""Location of an exported wiki on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from wikiexport.core.errors import NotFoundError
from wikiexport.core.models import ATTACHMENTS_DIR_NAME


@dataclass(frozen=True)
class ExportedWiki:
    """An export directory paired with the wiki root it belongs to.

    The export directory is what gets scanned; the base directory is the
    nearest ancestor (inclusive) holding an ``.attachments`` folder and is
    what root-relative links such as ``/Page/Sub-Page`` resolve against.
    """

    export_dir: Path
    base_dir: Path

    @classmethod
    def locate(cls, path: str | os.PathLike[str]) -> ExportedWiki:
        """Resolve the wiki for an export directory.

        Raises:
            NotFoundError: If the directory does not exist.
        """
        export_dir = Path(os.path.abspath(path))
        if not export_dir.is_dir():
            raise NotFoundError(f"Wiki export path not found: {export_dir}")

        base_dir = find_wiki_root(export_dir)
        return cls(export_dir=export_dir, base_dir=base_dir or export_dir)

    @property
    def subtree_prefix(self) -> tuple[str, ...]:
        """Path segments of the export directory below the wiki root.

        Empty when exporting the whole wiki.
        """
        try:
            return self.export_dir.relative_to(self.base_dir).parts
        except ValueError:
            return ()


def find_wiki_root(directory: Path) -> Path | None:
    """Walk upwards from ``directory`` to the first one holding ``.attachments``.

    Returns:
        The wiki root, or None when the filesystem root is reached first.
    """
    for candidate in (directory, *directory.parents):
        if (candidate / ATTACHMENTS_DIR_NAME).is_dir():
            return candidate
    return None
