"""CLI entry point for wikiexport."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from wikiexport import __version__

if TYPE_CHECKING:
    from wikiexport.config import ExportOptions


@click.group()
@click.version_option(version=__version__, prog_name="wikiexport")
def main() -> None:
    """Wikiexport: merge an exported wiki into a single HTML document."""
    pass


def _corpus_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Options selecting the wiki and its pages, shared by all commands."""
    options = [
        click.option(
            "-c",
            "--config",
            "config_path",
            default=None,
            help="Path to a YAML config file",
        ),
        click.option(
            "-p",
            "--path",
            default=None,
            help="Wiki export directory (default: current directory)",
        ),
        click.option(
            "-e",
            "--exclude-paths",
            multiple=True,
            help="Regex; pages whose path contains a match are skipped (repeatable)",
        ),
        click.option(
            "--include-unlisted-pages",
            is_flag=True,
            help="Also export pages not named in any .order file",
        ),
        click.option(
            "-s",
            "--single",
            "single_file",
            default=None,
            help="Export only this page and its sub-pages",
        ),
        click.option(
            "--attachments-path",
            default=None,
            help="Directory replacing the wiki's .attachments folder",
        ),
        click.option(
            "-v",
            "--verbose",
            is_flag=True,
            help="Enable verbose (DEBUG) logging",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@main.command()
@_corpus_options
@click.option("-o", "--output", default=None, help="HTML document to write (default: export.html)")
@click.option("--globaltoc", "global_toc", default=None, help="Title of a global table of contents")
@click.option(
    "--globaltoc-position",
    "global_toc_position",
    type=int,
    default=None,
    help="Page index where the global table of contents is inserted",
)
@click.option("--heading", is_flag=True, help="Add the page name as a heading")
@click.option(
    "--path-to-heading",
    is_flag=True,
    help="Add the page path above every page",
)
@click.option("--breakpage", "break_page", is_flag=True, help="Break after each page")
@click.option("--no-frontmatter", is_flag=True, help="Drop YAML front matter")
@click.option(
    "--filter",
    "filter_tags",
    default=None,
    help="Comma separated front matter tags (key:value) a page must have",
)
def export(
    config_path: str | None,
    verbose: bool,
    filter_tags: str | None,
    **flags: Any,
) -> None:
    """Export the wiki to a single HTML document."""
    from wikiexport.container import Container
    from wikiexport.core.errors import WikiExportError
    from wikiexport.exporter import WikiExporter

    options = _load_options(config_path, {**flags, "filter": filter_tags})
    _setup_logging(verbose, options.log_level)
    container = Container.create_default(options)

    try:
        output = WikiExporter(container).export()
    except WikiExportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Exported to {output}")


@main.command()
@_corpus_options
def scan(config_path: str | None, verbose: bool, **flags: Any) -> None:
    """List the pages that would be exported, in export order."""
    from wikiexport.container import Container
    from wikiexport.core.errors import WikiExportError
    from wikiexport.exporter import WikiExporter

    options = _load_options(config_path, flags)
    _setup_logging(verbose, options.log_level)
    exporter = WikiExporter(Container.create_default(options))

    try:
        pages = exporter.scan(exporter.locate_wiki())
    except WikiExportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for page in pages:
        click.echo(f"{'  ' * page.level}{page.relative_path}")


@main.command()
@_corpus_options
def toc(config_path: str | None, verbose: bool, **flags: Any) -> None:
    """Print the global table of contents of the wiki."""
    from wikiexport.container import Container
    from wikiexport.content.toc import create_global_toc
    from wikiexport.core.errors import WikiExportError
    from wikiexport.exporter import WikiExporter

    options = _load_options(config_path, flags)
    _setup_logging(verbose, options.log_level)
    exporter = WikiExporter(Container.create_default(options))

    try:
        pages = exporter.load(exporter.scan(exporter.locate_wiki()))
    except WikiExportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for line in create_global_toc([page.content or "" for page in pages]):
        click.echo(line)


def _load_options(config_path: str | None, flags: dict[str, Any]) -> ExportOptions:
    """Load options from the config file, environment and command line flags.

    Flags left at their click default (None, False or an empty tuple) do
    not override configured values.
    """
    from wikiexport.config import load_config
    from wikiexport.core.errors import ConfigError

    overrides: dict[str, Any] = {}
    for name, value in flags.items():
        if value is None or value is False or value == ():
            continue
        overrides[name] = list(value) if isinstance(value, tuple) else value

    try:
        return load_config(config_path, overrides)
    except ConfigError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)


def _setup_logging(verbose: bool, log_level: str = "INFO") -> None:
    """Configure logging for the command line."""
    level = logging.DEBUG if verbose else log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
