# flickrfeed/options.py
"""
Plugin options: the named configuration values an administrator edits.

OptionStore is the narrow get/set/default interface over the options table.
FlickrFeedOptions describes the option form and handles its save.
"""
from __future__ import annotations

import sqlite3
from typing import Callable
import time

from flickrfeed.config import DEFAULT_CACHE_TIME, Settings
from flickrfeed.feed_cache import FeedCache
from flickrfeed.logging_utils import log_event
from flickrfeed.repo import delete_option, get_option_value, insert_option_default, upsert_option_value
from flickrfeed.schemas import FeedConfig, OptionsSaveRequest

OPT_USER_ID = "flickrfeed_userid"
OPT_CACHE_TIME = "flickrfeed_cachetime"
OPT_CACHE_CLEAR = "flickrfeed_cacheclear"

# Older versions kept the cache itself in options
LEGACY_OPTIONS = ("flickrfeed_cache", "flickrfeed_lastmod")

TEXTBOX = "textbox"
CHECKBOX = "checkbox"


class OptionStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_option(self, key: str) -> str | None:
        return get_option_value(self.conn, name=key)

    def set_option(self, key: str, value) -> None:
        upsert_option_value(self.conn, name=key, value=_to_option_text(value))

    def set_option_default(self, key: str, value) -> None:
        insert_option_default(self.conn, name=key, value=_to_option_text(value))

    def purge_option(self, key: str) -> None:
        delete_option(self.conn, name=key)


def _to_option_text(value) -> str:
    # Booleans are stored as "1"/"0" like a checkbox post
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    return str(value)


def read_feed_config(options: OptionStore) -> FeedConfig:
    """Read user id + cache time fresh from the option store."""
    user_id = (options.get_option(OPT_USER_ID) or "").strip()
    raw_ttl = options.get_option(OPT_CACHE_TIME)

    ttl = DEFAULT_CACHE_TIME
    if raw_ttl is not None and raw_ttl.strip():
        try:
            ttl = int(raw_ttl.strip())
        except ValueError:
            ttl = -1
        if ttl < 0:
            log_event("invalid_cache_time", value=raw_ttl, fallback=DEFAULT_CACHE_TIME)
            ttl = DEFAULT_CACHE_TIME

    return FeedConfig(user_id=user_id, cache_ttl_seconds=ttl)


class FlickrFeedOptions:
    """Option definitions and save hook for the admin form."""

    def __init__(self, options: OptionStore, cache: FeedCache, settings: Settings, *,
                 clock: Callable[[], float] = time.time):
        self.options = options
        self.cache = cache
        self.settings = settings
        self.clock = clock

        options.set_option_default(OPT_CACHE_TIME, DEFAULT_CACHE_TIME)
        for key in LEGACY_OPTIONS:
            options.purge_option(key)

    def get_options_supported(self) -> dict[str, dict]:
        supported = {
            "Flickr User ID": {
                "key": OPT_USER_ID,
                "type": TEXTBOX,
                "order": 1,
                "desc": (
                    "The user ID of your Flickr account to fetch. NOTE: Not a username! "
                    'A Flickr ID has the format "XXXXXXXX@N00". It is listed under '
                    '"Useful Values" on https://www.flickr.com/services/api/explore/flickr.people.getPublicPhotos'
                ),
            },
            "Cache time": {
                "key": OPT_CACHE_TIME,
                "type": TEXTBOX,
                "order": 2,
                "desc": "The time in seconds the cache is kept until the data is fetched freshly.",
            },
        }
        if self.settings.allow_cache_clear:
            supported["Clear cache"] = {
                "key": OPT_CACHE_CLEAR,
                "type": CHECKBOX,
                "order": 3,
                "desc": "Check and save options to clear the cache on force.",
            }
        return supported

    def current_values(self) -> dict[str, str | None]:
        return {
            meta["key"]: self.options.get_option(meta["key"])
            for meta in self.get_options_supported().values()
        }

    def handle_option_save(self, form: OptionsSaveRequest) -> bool:
        """
        Store submitted option values.

        A set clear flag empties the cache, resets the last-refresh time to
        now, and is itself reset to false. Returns True if the cache was cleared.
        """
        if form.user_id is not None:
            self.options.set_option(OPT_USER_ID, form.user_id.strip())
        if form.cache_time is not None:
            self.options.set_option(OPT_CACHE_TIME, form.cache_time)

        cleared = False
        if form.cache_clear and self.settings.allow_cache_clear:
            now = int(self.clock())
            self.cache.clear(now)
            self.options.set_option(OPT_CACHE_CLEAR, False)
            log_event("feed_cache_cleared", lastmod=now)
            cleared = True

        log_event("options_saved", user_id_set=form.user_id is not None,
                  cache_time=form.cache_time, cache_cleared=cleared)
        return cleared
