from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Sequence

from journal_scraper.models import Article
from journal_scraper.utils.datetime_utils import format_rfc3339, parse_datetime_utc

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 1000


class CollectionDecodeError(ValueError):
    """Raised when a persisted article list cannot be decoded."""


class CollectionEncodeError(ValueError):
    """Raised when an article list cannot be encoded."""


def merge_articles(
    existing: Sequence[Article],
    incoming: Sequence[Article],
    limit: int,
) -> list[Article]:
    """Combine two article sequences into a deduplicated, newest-first list.

    Articles are keyed by URL. When a URL appears more than once the first
    occurrence wins, with ``existing`` scanned before ``incoming``, so a
    re-scraped article keeps its stored title and ``first_seen``. The result
    is sorted by ``first_seen`` descending and then cut to ``limit`` entries
    (``0`` keeps everything).
    """
    seen_urls: set[str] = set()
    unique: list[Article] = []
    for article in [*existing, *incoming]:
        if article.url in seen_urls:
            continue
        seen_urls.add(article.url)
        unique.append(article)

    unique.sort(key=lambda item: item.first_seen, reverse=True)

    if limit > 0:
        return unique[:limit]
    return unique


class ArticleCollection:
    """URL-unique, newest-first article list capped at ``limit`` entries."""

    def __init__(self, limit: int = DEFAULT_LIMIT, articles: Iterable[Article] = ()) -> None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self.limit = limit
        self.articles: list[Article] = list(articles)

    def merge(self, incoming: Sequence[Article]) -> None:
        """Replace the contents with the merge of the current and incoming articles."""
        before = len(self.articles)
        self.articles = merge_articles(self.articles, incoming, self.limit)
        logger.debug(
            "Merged %d incoming articles | before=%d after=%d limit=%d",
            len(incoming),
            before,
            len(self.articles),
            self.limit,
        )

    def urls(self) -> set[str]:
        return {article.url for article in self.articles}

    def __len__(self) -> int:
        return len(self.articles)

    def __iter__(self):
        return iter(self.articles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArticleCollection):
            return NotImplemented
        return self.articles == other.articles

    def __repr__(self) -> str:
        return f"ArticleCollection(limit={self.limit}, articles={len(self.articles)})"

    def to_dict(self) -> dict[str, Any]:
        return {"articles": [_article_to_dict(article) for article in self.articles]}

    @classmethod
    def from_dict(cls, payload: Any, *, limit: int = DEFAULT_LIMIT) -> ArticleCollection:
        if not isinstance(payload, dict):
            raise CollectionDecodeError("article list root must be an object")
        if "articles" not in payload:
            raise CollectionDecodeError("article list is missing the 'articles' field")

        raw_articles = payload["articles"]
        if raw_articles is None:
            raw_articles = []
        if not isinstance(raw_articles, list):
            raise CollectionDecodeError("'articles' must be a list")

        articles = [
            _article_from_dict(item, index=index)
            for index, item in enumerate(raw_articles, start=1)
        ]
        return cls(limit=limit, articles=merge_articles(articles, [], limit))

    def encode(self) -> bytes:
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError, AttributeError) as exc:
            raise CollectionEncodeError(f"failed to encode article list: {exc}") from exc

    @classmethod
    def decode(cls, data: bytes, *, limit: int = DEFAULT_LIMIT) -> ArticleCollection:
        try:
            payload = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise CollectionDecodeError(f"article list is not valid JSON: {exc}") from exc
        return cls.from_dict(payload, limit=limit)


def _article_to_dict(article: Article) -> dict[str, str]:
    return {
        "title": article.title,
        "url": article.url,
        "first_seen": format_rfc3339(article.first_seen),
    }


def _article_from_dict(item: Any, *, index: int) -> Article:
    if not isinstance(item, dict):
        raise CollectionDecodeError(f"article #{index} must be an object")

    title = item.get("title")
    url = item.get("url")
    if not isinstance(title, str):
        raise CollectionDecodeError(f"article #{index} has no string 'title'")
    if not isinstance(url, str) or not url.strip():
        raise CollectionDecodeError(f"article #{index} has no string 'url'")

    first_seen = parse_datetime_utc(item.get("first_seen"))
    if first_seen is None:
        raise CollectionDecodeError(
            f"article #{index} has an invalid 'first_seen': {item.get('first_seen')!r}"
        )

    return Article(title=title, url=url.strip(), first_seen=first_seen)
