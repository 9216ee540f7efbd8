from __future__ import annotations

import json
import random
from datetime import datetime, timedelta, timezone

import pytest

from journal_scraper.collection import (
    ArticleCollection,
    CollectionDecodeError,
    merge_articles,
)
from journal_scraper.models import Article

T0 = datetime(2021, 10, 14, tzinfo=timezone.utc)


def _article(url: str, first_seen: datetime, title: str = "blah") -> Article:
    return Article(title=title, url=url, first_seen=first_seen)


def _foo() -> Article:
    return _article("http://example.com/foo", datetime(2021, 10, 15, tzinfo=timezone.utc), "foo")


def _bar() -> Article:
    return _article("http://example.com/bar", datetime(2021, 10, 14, tzinfo=timezone.utc), "bar")


def test_merge_sorts_newest_first() -> None:
    collection = ArticleCollection(limit=0)
    collection.merge([_bar(), _foo()])

    assert collection.articles == [_foo(), _bar()]


def test_merge_truncates_after_sorting() -> None:
    articles = [
        _article(f"https://www.example.com/{i}", T0 + timedelta(days=i)) for i in range(10)
    ]
    random.Random(7).shuffle(articles)

    collection = ArticleCollection(limit=3)
    collection.merge(articles)

    assert len(collection) == 3
    assert [article.url for article in collection] == [
        "https://www.example.com/9",
        "https://www.example.com/8",
        "https://www.example.com/7",
    ]


def test_newest_article_late_in_batch_survives_truncation() -> None:
    existing = [_article(f"https://www.example.com/old-{i}", T0 + timedelta(hours=i)) for i in range(3)]
    late = _article("https://www.example.com/newest", T0 + timedelta(days=30))

    merged = merge_articles(existing, [late], limit=3)

    assert merged[0] == late
    assert len(merged) == 3


def test_merge_does_not_pad_short_results() -> None:
    articles = [
        _article(f"https://www.example.com/{i}", T0 + timedelta(days=i)) for i in range(3)
    ]

    collection = ArticleCollection(limit=10)
    collection.merge(articles)

    assert len(collection) == 3
    assert all(isinstance(article, Article) for article in collection)


def test_merge_dedupes_repeat_scrapes() -> None:
    collection = ArticleCollection(limit=5)
    collection.merge([_bar(), _foo()])
    collection.merge([_foo()])

    assert len(collection) == 2


def test_merge_dedupes_within_a_single_batch() -> None:
    first = _article("http://example.com/a", T0, "first")
    second = _article("http://example.com/a", T0 + timedelta(days=1), "second")

    merged = merge_articles([], [first, second], limit=0)

    assert merged == [first]


def test_existing_copy_wins_over_incoming_duplicate() -> None:
    existing = [_article("a", datetime(2021, 10, 14, tzinfo=timezone.utc), "a")]
    incoming = [
        _article("b", datetime(2021, 10, 15, tzinfo=timezone.utc), "b"),
        _article("a", datetime(2021, 10, 16, tzinfo=timezone.utc), "new-a"),
    ]

    merged = merge_articles(existing, incoming, limit=5)

    assert [(article.url, article.title) for article in merged] == [("b", "b"), ("a", "a")]
    assert merged[1].first_seen == datetime(2021, 10, 14, tzinfo=timezone.utc)


def test_merging_same_batch_twice_is_idempotent() -> None:
    batch = [_article(f"https://www.example.com/{i}", T0 + timedelta(days=i % 4)) for i in range(8)]

    once = merge_articles([], batch, limit=5)
    twice = merge_articles(once, batch, limit=5)

    assert twice == once


def test_empty_batch_is_a_noop() -> None:
    collection = ArticleCollection(limit=5)
    collection.merge([_bar(), _foo()])
    before = list(collection.articles)

    collection.merge([])

    assert collection.articles == before


def test_merge_result_is_ordered_and_unique() -> None:
    rng = random.Random(11)
    existing = merge_articles(
        [],
        [_article(f"u{rng.randint(0, 20)}", T0 + timedelta(minutes=rng.randint(0, 500))) for _ in range(15)],
        limit=0,
    )
    incoming = [_article(f"u{rng.randint(0, 20)}", T0 + timedelta(minutes=rng.randint(0, 500))) for _ in range(15)]

    merged = merge_articles(existing, incoming, limit=8)

    assert len(merged) <= 8
    assert len({article.url for article in merged}) == len(merged)
    for newer, older in zip(merged, merged[1:]):
        assert newer.first_seen >= older.first_seen


def test_negative_limit_is_rejected() -> None:
    with pytest.raises(ValueError):
        ArticleCollection(limit=-1)


def test_encode_uses_string_urls_and_rfc3339_timestamps() -> None:
    collection = ArticleCollection(limit=0, articles=[_foo()])

    payload = json.loads(collection.encode())

    assert payload == {
        "articles": [
            {
                "title": "foo",
                "url": "http://example.com/foo",
                "first_seen": "2021-10-15T00:00:00Z",
            }
        ]
    }


def test_encode_decode_preserves_articles_and_order() -> None:
    collection = ArticleCollection(limit=3)
    collection.merge([_bar(), _foo()])

    decoded = ArticleCollection.decode(collection.encode(), limit=3)

    assert decoded == collection
    assert decoded.articles[0].first_seen.tzinfo == timezone.utc


def test_decode_ignores_legacy_limit_field_and_normalizes_offsets() -> None:
    data = json.dumps(
        {
            "articles": [
                {
                    "title": "foo",
                    "url": "http://example.com/foo",
                    "first_seen": "2021-10-15T02:00:00+02:00",
                }
            ],
            "Limit": 1000,
        }
    ).encode("utf-8")

    decoded = ArticleCollection.decode(data, limit=7)

    assert decoded.limit == 7
    assert decoded.articles == [_foo()]


def test_decode_accepts_null_article_list() -> None:
    decoded = ArticleCollection.decode(b'{"articles": null}')

    assert len(decoded) == 0


@pytest.mark.parametrize(
    "data",
    [
        b"not json",
        b"[]",
        b"{}",
        b'{"articles": {"title": "x"}}',
        b'{"articles": [{"title": "x", "url": "http://example.com/x", "first_seen": "yesterday"}]}',
        b'{"articles": [{"title": "x", "first_seen": "2021-10-15T00:00:00Z"}]}',
    ],
)
def test_decode_rejects_malformed_payloads(data: bytes) -> None:
    with pytest.raises(CollectionDecodeError):
        ArticleCollection.decode(data)


def test_naive_timestamps_are_treated_as_utc_when_merging() -> None:
    existing = [_article("http://example.com/a", datetime(2021, 10, 14, tzinfo=timezone.utc))]
    incoming = [_article("http://example.com/b", datetime(2021, 10, 15))]

    merged = merge_articles(existing, incoming, limit=0)

    assert [article.url for article in merged] == ["http://example.com/b", "http://example.com/a"]
    assert merged[0].first_seen == datetime(2021, 10, 15, tzinfo=timezone.utc)
    assert merged[0].first_seen.tzinfo == timezone.utc


def test_decode_orders_and_caps_stored_articles() -> None:
    data = json.dumps(
        {
            "articles": [
                {"title": "old", "url": "http://example.com/old", "first_seen": "2021-01-01T00:00:00Z"},
                {"title": "new", "url": "http://example.com/new", "first_seen": "2022-01-01T00:00:00Z"},
                {"title": "dup", "url": "http://example.com/old", "first_seen": "2023-01-01T00:00:00Z"},
            ]
        }
    ).encode("utf-8")

    assert [article.title for article in ArticleCollection.decode(data, limit=0)] == ["new", "old"]
    assert [article.title for article in ArticleCollection.decode(data, limit=1)] == ["new"]


def test_decode_rejects_deeply_nested_payload() -> None:
    depth = 200_000
    data = b"[" * depth + b"]" * depth

    with pytest.raises(CollectionDecodeError):
        ArticleCollection.decode(data)
