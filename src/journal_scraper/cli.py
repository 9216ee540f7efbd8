from __future__ import annotations

import argparse
import logging
import sys

from journal_scraper.config import AppConfig, ConfigError, load_config
from journal_scraper.logging_config import setup_logging
from journal_scraper.models import Article
from journal_scraper.service import ScrapeService
from journal_scraper.sources import Source, create_source
from journal_scraper.store import ArticleStore, create_store
from journal_scraper.utils.datetime_utils import format_datetime

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="journal-scraper",
        description="Scrape journal article listings into a persisted article list.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override config log level (e.g. INFO, DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Scrape once and save new articles")
    subparsers.add_parser("dry-run", help="Scrape once and print articles that would be added")

    list_parser = subparsers.add_parser("list", help="Print stored articles, newest first")
    list_parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Maximum number of articles to print (default: all)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)
        store = create_store(app_config.storage)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    log_level = args.log_level or app_config.log_level
    setup_logging(log_level)

    if args.command == "list":
        return _run_list(store=store, limit=args.limit)

    try:
        sources = _build_sources(app_config)
    except ValueError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    dry_run = args.command == "dry-run"
    service = ScrapeService(sources=sources, store=store, dry_run=dry_run)

    stats = service.run_once()
    logger.info(
        "Run complete | scraped=%d added=%d stored=%d saved=%s errors=%d",
        stats.scraped,
        stats.added,
        stats.stored,
        stats.saved,
        len(stats.errors),
    )

    return 0 if stats.ok else 1


def _build_sources(app_config: AppConfig) -> list[Source]:
    sources: list[Source] = []
    for source_config in app_config.sources:
        source = create_source(source_config)
        sources.append(source)
    return sources


def _run_list(*, store: ArticleStore, limit: int) -> int:
    try:
        store.load()
    except Exception as exc:  # noqa: BLE001
        logger.exception("failed to load articles from %s: %s", store.address, exc)
        return 1

    articles = store.articles
    if limit > 0:
        articles = articles[:limit]
    for article in articles:
        print(_format_article_line(article))
    return 0


def _format_article_line(article: Article) -> str:
    return f"{format_datetime(article.first_seen)}  {article.title}  <{article.url}>"


if __name__ == "__main__":
    raise SystemExit(main())
