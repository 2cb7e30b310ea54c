"""Exclude matcher: decides which pages are left out of the corpus."""

from __future__ import annotations

import re

from wikiexport.core.models import PageRecord


class ExcludeMatcher:
    """Ordered set of case-insensitive "contains" patterns.

    A pattern ``Home`` is compiled to ``.*Home.*`` so it matches anywhere in
    a page's relative path. A page is excluded if ANY pattern matches.
    """

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns: list[re.Pattern[str]] = []
        for pattern in patterns or []:
            self.register(pattern)

    def register(self, pattern: str) -> None:
        """Add a raw exclude pattern."""
        self._patterns.append(re.compile(f".*{pattern}.*", re.IGNORECASE))

    def matches(self, page: PageRecord) -> bool:
        """True if the page's relative path matches any pattern."""
        return any(pattern.match(page.relative_path) for pattern in self._patterns)
