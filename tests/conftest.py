# tests/conftest.py
from __future__ import annotations

import html
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from flickrfeed.db import db_conn
from flickrfeed.schemas import FeedItem

USER_ID = "12345678@N00"
BASE_TIME = datetime(2026, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_db(tmp_path, monkeypatch):
    monkeypatch.setenv("FLICKRFEED_DB_PATH", str(tmp_path / "test.db"))
    for name in (
        "FLICKRFEED_ENDPOINT",
        "FLICKRFEED_FETCH_TIMEOUT_S",
        "FLICKRFEED_DATE_FORMAT",
        "FLICKRFEED_ALLOW_CACHE_CLEAR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def conn():
    with db_conn() as c:
        yield c


# ---------------------------------------------------------------------
# Sample feed data
# ---------------------------------------------------------------------

def thumb_html(n: int) -> str:
    return (
        f'<a href="https://www.flickr.com/photos/{USER_ID}/{n}/" title="Photo {n}">'
        f'<img src="https://live.staticflickr.com/65535/{n}_m.jpg" width="240" height="180" alt="Photo {n}" /></a>'
    )


def flickr_description(n: int) -> str:
    """Description markup the way the public feed delivers it."""
    return (
        f' <p><a href="https://www.flickr.com/people/{USER_ID}/">someone</a> posted a photo:</p>\n\n'
        f"<p>{thumb_html(n)}</p>\n\n"
        f"<p>description {n}</p>"
    )


def make_item(n: int, *, description: str | None = None) -> FeedItem:
    return FeedItem(
        title=f"Photo {n}",
        link=f"https://www.flickr.com/photos/{USER_ID}/{n}/",
        published_at=BASE_TIME - timedelta(hours=n),
        description=flickr_description(n) if description is None else description,
    )


def flickr_rss(items: list[FeedItem]) -> str:
    """Serialize items as an RSS 2.0 document with escaped descriptions."""
    parts = [
        '<?xml version="1.0" encoding="utf-8" standalone="yes"?>',
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">',
        "  <channel>",
        "    <title>Uploads from someone</title>",
        f"    <link>https://www.flickr.com/photos/{USER_ID}/</link>",
    ]
    for item in items:
        parts.extend([
            "    <item>",
            f"      <title>{html.escape(item.title)}</title>",
            f"      <link>{html.escape(item.link)}</link>",
            f"      <description>{html.escape(item.description)}</description>",
            f"      <pubDate>{format_datetime(item.published_at)}</pubDate>",
            "    </item>",
        ])
    parts.extend(["  </channel>", "</rss>"])
    return "\n".join(parts)


class FakeClock:
    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


class FakeFetcher:
    """Stands in for the network: records each URL, returns items or raises."""

    def __init__(self, items: list[FeedItem] | None = None, *, error: Exception | None = None):
        self.items = list(items or [])
        self.error = error
        self.calls: list[str] = []

    def __call__(self, url: str) -> list[FeedItem]:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def clock():
    return FakeClock()
