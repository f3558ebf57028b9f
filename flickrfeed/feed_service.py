# flickrfeed/feed_service.py
"""
Fetch-cache-expire policy and rendering for the public photo feed.

Freshness rule (get_feed):
- no user id configured -> [] (feature disabled, no cache or network access)
- cache row absent, timestamp absent, or now - lastmod > ttl -> refetch
- otherwise -> cached list unchanged (an empty cached list is still "present")

A failed refetch raises and leaves both cache rows untouched, so the
last-known-good list keeps serving until a refresh succeeds.
"""
from __future__ import annotations

import sqlite3
import time
from typing import Callable
from urllib.parse import urlencode

from flickrfeed.cache_utils import is_cache_expired
from flickrfeed.config import Settings, load_settings
from flickrfeed.description import extract_text, extract_thumbnail
from flickrfeed.error_codes import CONFIG_MISSING
from flickrfeed.feed_cache import CACHE_NAME, LASTMOD_NAME, FeedCache
from flickrfeed.logging_utils import log_event
from flickrfeed.options import OptionStore, read_feed_config
from flickrfeed.render import format_date, render_thumb_list
from flickrfeed.rss_fetch import RSSFetchError, retrieve_feed
from flickrfeed.rss_parse import RSSParseError
from flickrfeed.schemas import FeedItem, FeedItemView

Fetcher = Callable[[str], list[FeedItem]]

DEFAULT_COUNT = 4
DEFAULT_CSS_CLASS = "flickrfeed"


def build_feed_url(endpoint: str, user_id: str) -> str:
    """Public photos feed URL for a user id, id percent-encoded."""
    return f"{endpoint}?{urlencode({'id': user_id, 'format': 'rss2'})}"


class FeedService:
    def __init__(
        self,
        cache: FeedCache,
        options: OptionStore,
        settings: Settings,
        *,
        fetcher: Fetcher | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cache = cache
        self.options = options
        self.settings = settings
        self.fetcher = fetcher or self._default_fetcher
        self.clock = clock

    def _default_fetcher(self, url: str) -> list[FeedItem]:
        return retrieve_feed(url, timeout_s=self.settings.fetch_timeout_s)

    def get_feed(self) -> list[FeedItem]:
        """
        Return the feed items, either from cache or freshly fetched.

        Raises:
            RSSFetchError: network failure, timeout, or non-200 response
            RSSParseError: response is not a valid RSS document
        """
        cfg = read_feed_config(self.options)
        if not cfg.user_id:
            log_event("feed_disabled", code=CONFIG_MISSING)
            return []

        url = build_feed_url(self.settings.endpoint, cfg.user_id)
        cached = self.cache.get(CACHE_NAME)
        lastmod = self.cache.get_timestamp(LASTMOD_NAME)
        now = int(self.clock())

        if cached is not None and not is_cache_expired(lastmod, cfg.cache_ttl_seconds, now):
            log_event("feed_cache_hit", items=len(cached), age_s=now - lastmod)
            return cached

        log_event(
            "feed_refetch",
            url=url,
            reason="no_cache" if cached is None or lastmod is None else "expired",
        )
        items = self.fetcher(url)

        self.cache.put(CACHE_NAME, items)
        self.cache.put_timestamp(LASTMOD_NAME, now)
        log_event("feed_refreshed", items=len(items), lastmod=now)
        return items

    def cached_feed(self) -> list[FeedItem]:
        """Last-known-good items from cache, never touching the network."""
        return self.cache.get(CACHE_NAME) or []

    def get_feed_or_cached(self) -> list[FeedItem]:
        """get_feed(), falling back to the cached list when the refresh fails."""
        try:
            return self.get_feed()
        except (RSSFetchError, RSSParseError) as exc:
            log_event("feed_fetch_failed", error_code=exc.error_code, error_message=str(exc))
            return self.cached_feed()

    def render(self, count: int = DEFAULT_COUNT, css_class: str = DEFAULT_CSS_CLASS) -> str:
        """
        HTML list of the first `count` linked thumbnails, in feed order.

        Items without a thumbnail are skipped and not counted. An empty feed
        renders as "" (no wrapper).
        """
        items = self.get_feed_or_cached()
        if not items:
            return ""

        thumbs: list[str] = []
        for item in items:
            if len(thumbs) >= count:
                break
            thumb = self.get_item_link_and_thumb(item)
            if thumb:
                thumbs.append(thumb)

        return render_thumb_list(thumbs, css_class=css_class)

    # --- item accessors ---

    @staticmethod
    def get_item_link_and_thumb(item: FeedItem) -> str | None:
        return extract_thumbnail(item.description)

    @staticmethod
    def get_item_description(item: FeedItem) -> str | None:
        return extract_text(item.description)

    @staticmethod
    def get_item_url(item: FeedItem) -> str:
        return item.link

    @staticmethod
    def get_item_title(item: FeedItem) -> str:
        return item.title

    def get_item_date(self, item: FeedItem) -> str:
        return format_date(item.published_at, self.settings.date_format)

    def item_view(self, item: FeedItem) -> FeedItemView:
        return FeedItemView(
            title=self.get_item_title(item),
            url=self.get_item_url(item),
            date=self.get_item_date(item),
            thumbnail=self.get_item_link_and_thumb(item),
            description_text=self.get_item_description(item),
        )


def build_feed_service(
    conn: sqlite3.Connection,
    *,
    settings: Settings | None = None,
    fetcher: Fetcher | None = None,
    clock: Callable[[], float] = time.time,
) -> FeedService:
    """Wire a FeedService to a DB connection with the process settings."""
    return FeedService(
        FeedCache(conn),
        OptionStore(conn),
        settings or load_settings(),
        fetcher=fetcher,
        clock=clock,
    )
