"""Bulk Wayback Machine snapshot lookups."""

__version__ = "0.3.0"

__all__ = ["__version__"]
