"""Reader for ``.order`` manifests."""

from __future__ import annotations

from pathlib import Path

from wikiexport.core.models import ORDER_FILE_NAME


def manifest_path(directory: Path) -> Path:
    """Location of the manifest of a directory."""
    return directory / ORDER_FILE_NAME


def read_manifest(directory: Path) -> list[str] | None:
    """Read the page order of a directory.

    The manifest lists one page base name (without ``.md``) per line.
    Blank lines are skipped.

    Returns:
        Page names in manifest order, or None if the directory has no
        manifest.
    """
    path = manifest_path(directory)
    if not path.is_file():
        return None

    names = []
    for line in path.read_text(encoding="utf-8-sig").splitlines():
        name = line.strip()
        if name:
            names.append(name)
    return names


def reorder_by_manifest(pages: list[Path], names: list[str]) -> list[Path]:
    """Move pages named in the manifest to the front, in manifest order.

    Names are matched case-insensitively against page base names. Pages the
    manifest does not mention follow in their original order. Manifest names
    without a matching page are ignored.
    """
    by_name: dict[str, Path] = {}
    for page in pages:
        by_name.setdefault(page.stem.lower(), page)

    listed: list[Path] = []
    for name in names:
        page = by_name.get(name.lower())
        if page is not None and page not in listed:
            listed.append(page)

    return listed + [page for page in pages if page not in listed]
