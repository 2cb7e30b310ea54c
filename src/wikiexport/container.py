"""Dependency injection container for wikiexport."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from markdown_it.token import Token

from wikiexport.config import ExportOptions
from wikiexport.core.interfaces import ContentLoaderPort, LogSinkPort, MarkdownEnginePort
from wikiexport.core.models import PageRecord


@dataclass
class Container:
    """DI container holding the options and all ports."""

    options: ExportOptions
    sink: LogSinkPort
    loader: ContentLoaderPort
    engine: MarkdownEnginePort

    @staticmethod
    def create_default(options: ExportOptions) -> Container:
        """Create a container with production adapters."""
        from wikiexport.adapters.fs_loader import FileContentLoader
        from wikiexport.adapters.log_sink import LoggingSink
        from wikiexport.adapters.markdown_engine import MarkdownItEngine

        return Container(
            options=options,
            sink=LoggingSink(),
            loader=FileContentLoader(),
            engine=MarkdownItEngine(),
        )

    @staticmethod
    def create_for_testing(
        options: ExportOptions | None = None,
        sink: LogSinkPort | None = None,
        loader: ContentLoaderPort | None = None,
        engine: MarkdownEnginePort | None = None,
    ) -> Container:
        """Create a container with test/mock adapters.

        All parameters are optional. Provide mocks for the components
        you want to control in tests; the default sink discards messages.
        """
        if options is None:
            options = ExportOptions()

        class StubSink(LogSinkPort):
            def log(self, message: str, level: int = logging.INFO, indent: int = 0) -> None:
                pass

        # Use stubs that raise if accidentally called without being mocked
        class StubLoader(ContentLoaderPort):
            def load(self, page: PageRecord) -> str | None:
                raise NotImplementedError("Provide a mock loader")

        class StubEngine(MarkdownEnginePort):
            def parse(self, markdown: str) -> list[Token]:
                raise NotImplementedError("Provide a mock engine")

            def render(self, tokens: list[Token]) -> str:
                raise NotImplementedError("Provide a mock engine")

        return Container(
            options=options,
            sink=sink or StubSink(),
            loader=loader or StubLoader(),
            engine=engine or StubEngine(),
        )
