# flickrfeed/feed_cache.py
"""
Durable storage for the fetched feed and its last-refresh time.

Two rows in plugin_storage under one type tag:
- CACHE_NAME: the parsed item list as a JSON blob
- LASTMOD_NAME: UNIX seconds of the last refresh (or clear)

Pure storage: expiry is decided by the caller (FeedService).
"""
from __future__ import annotations

import sqlite3

from pydantic import ValidationError

from flickrfeed.logging_utils import log_event
from flickrfeed.repo import get_storage_data, upsert_storage_data
from flickrfeed.schemas import FeedItem, FeedItemList

STORAGE_TYPE = "flickrfeed"
CACHE_NAME = "flickrfeed_cache"
LASTMOD_NAME = "flickrfeed_lastmod"


class FeedCache:
    def __init__(self, conn: sqlite3.Connection, *, type_tag: str = STORAGE_TYPE):
        self.conn = conn
        self.type_tag = type_tag

    def get(self, name: str = CACHE_NAME) -> list[FeedItem] | None:
        """
        Return the cached items for `name`.

        None means there is no row, or the row cannot be decoded (so the
        caller refetches). An empty payload is a present-but-empty cache
        and comes back as [].
        """
        data = get_storage_data(self.conn, type_=self.type_tag, aux=name)
        if data is None:
            return None
        if not data.strip():
            return []
        try:
            return FeedItemList.validate_json(data)
        except ValidationError as exc:
            log_event("feed_cache_corrupt", type=self.type_tag, aux=name, errors=exc.error_count())
            return None

    def put(self, name: str = CACHE_NAME, items: list[FeedItem] | None = None) -> None:
        """Upsert the payload row. Empty/None stores an empty list (explicit clear)."""
        payload = FeedItemList.dump_json(list(items or [])).decode("utf-8")
        upsert_storage_data(self.conn, type_=self.type_tag, aux=name, data=payload)

    def get_timestamp(self, name: str = LASTMOD_NAME) -> int | None:
        data = get_storage_data(self.conn, type_=self.type_tag, aux=name)
        if data is None:
            return None
        try:
            return int(data)
        except ValueError:
            return None

    def put_timestamp(self, name: str, ts: int) -> None:
        upsert_storage_data(self.conn, type_=self.type_tag, aux=name, data=str(int(ts)))

    def clear(self, now: int) -> None:
        """Administrative clear: empty payload, freshness clock reset to `now`."""
        self.put(CACHE_NAME, [])
        self.put_timestamp(LASTMOD_NAME, now)
