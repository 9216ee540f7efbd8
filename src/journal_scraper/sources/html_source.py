from __future__ import annotations

import logging
from datetime import datetime, timezone

import requests
from bs4 import BeautifulSoup

from journal_scraper import __version__
from journal_scraper.config import SourceSettings
from journal_scraper.models import Article
from journal_scraper.utils.url_utils import site_root

from .base import Source
from .extractor import DEFAULT_TITLE_SELECTORS, ExtractionError, element_to_article
from .registry import register_source

logger = logging.getLogger(__name__)

DEFAULT_SELECTOR = "a.issue-item__title"
DEFAULT_MIN_ARTICLES = 5
DEFAULT_TIMEOUT_SECONDS = 30


class HtmlListingSource(Source):
    """Scrape article links from an HTML table-of-contents page.

    Every element matching ``selector`` is handed to the extractor. Elements
    that do not yield an article are logged and skipped.
    """

    def __init__(self, settings: SourceSettings) -> None:
        options = settings.options
        super().__init__(
            source_id=settings.id,
            min_articles=int(options.get("min_articles", DEFAULT_MIN_ARTICLES)),
        )
        self.url = settings.url
        self.selector = str(options.get("selector") or DEFAULT_SELECTOR)
        self.base_url = str(options.get("base_url") or site_root(settings.url))
        self.title_selectors = tuple(options.get("title_selectors") or DEFAULT_TITLE_SELECTORS)
        timeout_raw = options.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        self.timeout_seconds = int(timeout_raw) if timeout_raw is not None else DEFAULT_TIMEOUT_SECONDS

    def fetch(self) -> list[Article]:
        headers = {"User-Agent": f"journal-scraper/{__version__}"}
        response = requests.get(self.url, timeout=self.timeout_seconds, headers=headers)
        response.raise_for_status()

        return self.parse(response.content, observed_at=datetime.now(timezone.utc))

    def parse(self, page: bytes | str, *, observed_at: datetime) -> list[Article]:
        soup = BeautifulSoup(page, "html.parser")

        articles: list[Article] = []
        skipped = 0
        for element in soup.select(self.selector):
            try:
                article = element_to_article(
                    element,
                    self.base_url,
                    observed_at,
                    title_selectors=self.title_selectors,
                )
            except ExtractionError as exc:
                skipped += 1
                logger.debug("Skipping element on %s: %s", self.url, exc)
                continue
            articles.append(article)

        logger.info(
            "Source %s extracted %d articles (skipped=%d)",
            self.source_id,
            len(articles),
            skipped,
        )
        return articles


@register_source("html_listing")
def _build_html_listing_source(settings: SourceSettings) -> Source:
    return HtmlListingSource(settings)
