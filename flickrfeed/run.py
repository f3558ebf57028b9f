# flickrfeed/run.py
from __future__ import annotations

import argparse
import json
import sys

from dotenv import load_dotenv

from flickrfeed.config import load_settings
from flickrfeed.db import db_conn
from flickrfeed.feed_cache import FeedCache
from flickrfeed.feed_service import DEFAULT_COUNT, DEFAULT_CSS_CLASS, build_feed_service
from flickrfeed.options import FlickrFeedOptions, OptionStore
from flickrfeed.schemas import OptionsSaveRequest


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    p = argparse.ArgumentParser(prog="flickrfeed", description="Print the latest public Flickr thumbnails.")
    p.add_argument("--count", type=int, default=DEFAULT_COUNT, help="number of thumbnails")
    p.add_argument("--css-class", default=DEFAULT_CSS_CLASS, help="class attribute of the <ul>")
    p.add_argument("--set-user-id", help="store the Flickr user id option")
    p.add_argument("--set-cache-time", type=int, help="store the cache time option (seconds)")
    p.add_argument("--clear-cache", action="store_true", help="empty the cache and reset its timestamp")
    p.add_argument("--json", action="store_true", help="print items as JSON instead of HTML")
    args = p.parse_args(argv)

    if args.count < 0:
        p.error("--count must be >= 0")
    if args.set_cache_time is not None and args.set_cache_time < 0:
        p.error("--set-cache-time must be >= 0")

    settings = load_settings()

    with db_conn() as conn:
        if args.set_user_id is not None or args.set_cache_time is not None or args.clear_cache:
            if args.clear_cache and not settings.allow_cache_clear:
                p.error("cache clearing is disabled (FLICKRFEED_ALLOW_CACHE_CLEAR)")
            plugin_options = FlickrFeedOptions(OptionStore(conn), FeedCache(conn), settings)
            plugin_options.handle_option_save(
                OptionsSaveRequest(
                    user_id=args.set_user_id,
                    cache_time=args.set_cache_time,
                    cache_clear=args.clear_cache,
                )
            )

        service = build_feed_service(conn, settings=settings)
        if args.json:
            items = service.get_feed_or_cached()[: args.count]
            print(json.dumps([service.item_view(item).model_dump() for item in items], indent=2))
        else:
            fragment = service.render(args.count, args.css_class)
            if fragment:
                print(fragment)

    return 0


if __name__ == "__main__":
    sys.exit(main())
