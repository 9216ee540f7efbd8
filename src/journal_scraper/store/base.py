from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from journal_scraper.collection import (
    DEFAULT_LIMIT,
    ArticleCollection,
    CollectionDecodeError,
    CollectionEncodeError,
)
from journal_scraper.models import Article

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for article store failures that are not backend I/O errors."""


class StoreDecodeError(StoreError, ValueError):
    """Raised when persisted data cannot be decoded into an article list."""


class StoreEncodeError(StoreError, ValueError):
    """Raised when the article list cannot be encoded for persistence."""


class StoreNotLoadedError(StoreError, RuntimeError):
    """Raised when add() or save() is called before load()."""


class ArticleStore(ABC):
    """Persistent, size-bounded list of scraped articles.

    Callers use a store in three phases: ``load()``, then any number of
    ``add()`` calls, then ``save()``. Subclasses only implement raw blob
    access through ``_read_blob`` and ``_write_blob``.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self.limit = limit
        self._collection: ArticleCollection | None = None

    @property
    @abstractmethod
    def address(self) -> str:
        """Human-readable location of the persisted blob."""

    @abstractmethod
    def _read_blob(self) -> bytes | None:
        """Return the stored blob, or None if nothing is stored yet."""

    @abstractmethod
    def _write_blob(self, data: bytes) -> None:
        """Replace the stored blob with data."""

    @property
    def collection(self) -> ArticleCollection:
        if self._collection is None:
            raise StoreNotLoadedError(f"store {self.address} used before load()")
        return self._collection

    @property
    def articles(self) -> list[Article]:
        return list(self.collection.articles)

    def load(self) -> None:
        """Retrieve the current article list from persistent storage.

        A missing or empty blob yields an empty list.
        """
        data = self._read_blob()
        if not data:
            logger.info("No stored articles at %s; starting empty", self.address)
            self._collection = ArticleCollection(limit=self.limit)
            return

        try:
            self._collection = ArticleCollection.decode(data, limit=self.limit)
        except CollectionDecodeError as exc:
            raise StoreDecodeError(f"cannot decode articles from {self.address}: {exc}") from exc

        logger.info("Loaded %d articles from %s", len(self._collection), self.address)

    def add(self, articles: Sequence[Article]) -> None:
        self.collection.merge(articles)

    def save(self) -> None:
        try:
            data = self.collection.encode()
        except CollectionEncodeError as exc:
            raise StoreEncodeError(f"cannot encode articles for {self.address}: {exc}") from exc

        self._write_blob(data)
        logger.info("Saved %d articles to %s", len(self.collection), self.address)
