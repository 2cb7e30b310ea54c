"""wikiexport: merge an exported wiki tree into a single linked document."""

__version__ = "0.3.0"
