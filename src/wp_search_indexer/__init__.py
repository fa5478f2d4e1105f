"""WordPress to search service indexing."""

__version__ = "1.0.0"
