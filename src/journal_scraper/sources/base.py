from __future__ import annotations

from abc import ABC, abstractmethod

from journal_scraper.models import Article


class Source(ABC):
    def __init__(self, source_id: str, *, min_articles: int = 0) -> None:
        self.source_id = source_id
        self.min_articles = min_articles

    @abstractmethod
    def fetch(self) -> list[Article]:
        """Fetch the listing and return the articles found on it."""
