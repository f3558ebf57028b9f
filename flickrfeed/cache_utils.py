"""Cache utilities for the feed cache.

Provides the freshness check used by FeedService.get_feed.
"""
from __future__ import annotations


def is_cache_expired(lastmod: int | None, ttl_seconds: int, now: int) -> bool:
    """
    Check if the cached feed has exceeded its TTL.
    Args:
        lastmod: UNIX seconds of the last refresh or clear (None = never)
        ttl_seconds: max age in seconds before expiration
        now: current UNIX seconds
    Returns:
        True if expired (age > ttl, or no timestamp), False if fresh.
        An age exactly equal to the TTL is still fresh.
    """
    if lastmod is None:
        return True
    return (now - lastmod) > ttl_seconds
