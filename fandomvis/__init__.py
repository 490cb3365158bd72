"""Fan-fiction archive scraping, indexing and ship network analysis."""

__version__ = "0.1.0"
