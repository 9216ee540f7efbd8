from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from journal_scraper.models import Article
from journal_scraper.sources import Source
from journal_scraper.store import ArticleStore

logger = logging.getLogger(__name__)


class BatchTooSmallError(RuntimeError):
    """Raised when a source returns implausibly few articles."""

    def __init__(self, source_id: str, count: int, minimum: int) -> None:
        super().__init__(
            f"source {source_id} returned {count} articles, expected at least {minimum}"
        )
        self.source_id = source_id
        self.count = count
        self.minimum = minimum


@dataclass(slots=True)
class RunStats:
    scraped: int = 0
    added: int = 0
    stored: int = 0
    saved: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ScrapeService:
    def __init__(
        self,
        *,
        sources: list[Source],
        store: ArticleStore,
        dry_run: bool = False,
        preview_callback: Callable[[Article], None] | None = None,
    ) -> None:
        self.sources = sources
        self.store = store
        self.dry_run = dry_run
        self.preview_callback = preview_callback or _default_preview

    def run_once(self) -> RunStats:
        stats = RunStats()

        try:
            self.store.load()
        except Exception as exc:  # noqa: BLE001
            message = f"failed to load articles from {self.store.address}: {exc}"
            logger.exception(message)
            stats.errors.append(message)
            return stats

        previewed_urls: set[str] = set()
        for source in self.sources:
            try:
                batch = self._fetch_batch(source)
            except Exception as exc:  # noqa: BLE001
                message = f"source {source.source_id} fetch failed: {exc}"
                logger.exception(message)
                stats.errors.append(message)
                continue

            stats.scraped += len(batch)
            known_urls = self.store.collection.urls() | previewed_urls
            new_articles: list[Article] = []
            for article in batch:
                if article.url in known_urls:
                    continue
                known_urls.add(article.url)
                new_articles.append(article)

            if self.dry_run:
                previewed_urls.update(article.url for article in new_articles)
                for article in new_articles:
                    self.preview_callback(article)
                stats.added += len(new_articles)
                continue

            self.store.add(batch)
            kept_urls = self.store.collection.urls()
            stats.added += sum(1 for article in new_articles if article.url in kept_urls)

        stats.stored = len(self.store.collection)
        if self.dry_run:
            return stats

        try:
            self.store.save()
        except Exception as exc:  # noqa: BLE001
            message = f"failed to save articles to {self.store.address}: {exc}"
            logger.exception(message)
            stats.errors.append(message)
            return stats

        stats.saved = True
        return stats

    def _fetch_batch(self, source: Source) -> list[Article]:
        batch = source.fetch()
        logger.info("Source %s returned %d articles", source.source_id, len(batch))
        if len(batch) < source.min_articles:
            raise BatchTooSmallError(source.source_id, len(batch), source.min_articles)
        return batch


def _default_preview(article: Article) -> None:
    print(f"[DRY RUN] WOULD ADD: {article.title}")
    print(f"  URL: {article.url}")
    print(f"  First seen: {article.first_seen.isoformat()}")
    print("")
