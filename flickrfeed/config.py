# flickrfeed/config.py
"""
Process-level settings read from the environment.

The historical plugin variants differed only in endpoint host, whether the
manual clear-cache option existed, and help text. Those differences live here
as settings instead of separate code paths.

Plugin options (user id, cache time) are NOT settings: they live in the
options table and are read on every fetch (see options.py).
"""
from __future__ import annotations

import os

from pydantic import BaseModel


DEFAULT_ENDPOINT = "https://www.flickr.com/services/feeds/photos_public.gne"
DEFAULT_DB_PATH = "./data/flickrfeed.db"
DEFAULT_CACHE_TIME = 86400


class Settings(BaseModel):
    db_path: str = DEFAULT_DB_PATH
    endpoint: str = DEFAULT_ENDPOINT
    fetch_timeout_s: float = 10.0
    date_format: str = "%B %d, %Y"
    allow_cache_clear: bool = True


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """
    Build Settings from FLICKRFEED_* environment variables.

    Called per request/command (not cached) so tests can monkeypatch the env.
    """
    return Settings(
        db_path=os.environ.get("FLICKRFEED_DB_PATH", DEFAULT_DB_PATH),
        endpoint=os.environ.get("FLICKRFEED_ENDPOINT", DEFAULT_ENDPOINT),
        fetch_timeout_s=float(os.environ.get("FLICKRFEED_FETCH_TIMEOUT_S", "10.0")),
        date_format=os.environ.get("FLICKRFEED_DATE_FORMAT", "%B %d, %Y"),
        allow_cache_clear=_env_bool("FLICKRFEED_ALLOW_CACHE_CLEAR", True),
    )
