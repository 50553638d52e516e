"""Document auto-tagging and relevance search."""

__version__ = "0.1.0"
