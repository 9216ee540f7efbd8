from __future__ import annotations

import re
from datetime import datetime
from typing import Sequence

from bs4 import Tag

from journal_scraper.models import Article
from journal_scraper.utils.datetime_utils import to_utc
from journal_scraper.utils.url_utils import resolve_url

DEFAULT_TITLE_SELECTORS = ("h2", "h3")

_MULTISPACE = re.compile(r"\s+")


class ExtractionError(ValueError):
    """Raised when a single listing element cannot be turned into an Article."""


def element_to_article(
    element: Tag,
    base_url: str,
    observed_at: datetime,
    title_selectors: Sequence[str] = DEFAULT_TITLE_SELECTORS,
) -> Article:
    """Build an Article from a listing link element.

    ``element`` is the ``<a>`` tag for one article. Its href is resolved
    against ``base_url``. Some listing pages put the title in ``<h2>`` and
    others in ``<h3>``, so each of ``title_selectors`` is tried in order and
    the first non-empty text wins. All elements matching a selector
    contribute their text. ``observed_at`` becomes the article's
    ``first_seen``.
    """
    href = str(element.get("href") or "").strip()
    if not href:
        raise ExtractionError("element has no or empty href value")

    try:
        url = resolve_url(base_url, href)
    except ValueError as exc:
        raise ExtractionError(f"cannot resolve href {href!r}: {exc}") from exc

    title = ""
    for selector in title_selectors:
        matches = element.select(selector)
        title = _normalize_whitespace(" ".join(match.get_text(" ") for match in matches))
        if title:
            break
    if not title:
        raise ExtractionError("no article title could be derived from element")

    return Article(title=title, url=url, first_seen=to_utc(observed_at))


def _normalize_whitespace(value: str) -> str:
    return _MULTISPACE.sub(" ", value).strip()
