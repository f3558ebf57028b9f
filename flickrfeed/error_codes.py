"""Stable failure codes for fetch and parse operations.

Used by: rss_fetch, rss_parse, feed_service, logging, HTTP problem details.
"""

FETCH_TIMEOUT = "FETCH_TIMEOUT"
FETCH_TRANSIENT = "FETCH_TRANSIENT"
RATE_LIMITED = "RATE_LIMITED"
FETCH_PERMANENT = "FETCH_PERMANENT"
PARSE_ERROR = "PARSE_ERROR"

CONFIG_MISSING = "CONFIG_MISSING"      # No Flickr user id configured (not raised)

  # HTTP surface codes
HTTP_ERROR = "http_error"
VALIDATION_ERROR = "validation_error"
INTERNAL_ERROR = "internal_error"
