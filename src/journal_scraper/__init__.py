"""Scrape journal article listings into a persisted, deduplicated article list."""

__version__ = "0.1.0"
