# Enable type hint syntax from future Python versions (allows using | for union types)
from __future__ import annotations

import http.client
# Import urllib modules for making HTTP requests
import urllib.request
import urllib.error

from flickrfeed.error_codes import FETCH_TIMEOUT, FETCH_TRANSIENT, RATE_LIMITED, FETCH_PERMANENT
from flickrfeed.rss_parse import parse_rss
from flickrfeed.schemas import FeedItem


# Custom exception class for RSS fetching errors - carries a stable error code for logging
class RSSFetchError(Exception):
    """Raised when RSS cannot be fetched."""

    def __init__(self, message: str, *, error_code: str = FETCH_TRANSIENT, status: int | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.status = status


def error_code_for_status(status: int | None) -> str:
    """429 is rate limiting, other 4xx will not succeed on retry, the rest is transient."""
    if status == 429:
        return RATE_LIMITED
    if status is not None and 400 <= status < 500:
        return FETCH_PERMANENT
    return FETCH_TRANSIENT


def _http_failure(status: int | None) -> RSSFetchError:
    return RSSFetchError(f"RSS_FETCH_FAIL: HTTP {status}", error_code=error_code_for_status(status), status=status)


# Fetch RSS XML content from a URL - one HTTP GET, no retries
def fetch_rss(url: str, *, timeout_s: float = 10.0) -> str:
    """Fetch RSS XML from a URL and return response text."""
    req = urllib.request.Request(
        url,
        headers={"User-Agent": "flickrfeed/1.2"},
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            status = getattr(resp, "status", None)
            # Decode as UTF-8, replacing undecodable bytes
            body = resp.read().decode("utf-8", errors="replace")

            # Anything other than 200 (OK) is a failed fetch
            if status != 200:
                raise _http_failure(status)

            return body

    # HTTP-specific errors (404, 500, ...) become our custom exception
    except urllib.error.HTTPError as exc:
        raise _http_failure(exc.code) from exc
    # Connection refused, DNS failure, and socket timeouts wrapped by urllib
    except urllib.error.URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise RSSFetchError("RSS_FETCH_FAIL: timeout", error_code=FETCH_TIMEOUT) from exc
        raise RSSFetchError(f"RSS_FETCH_FAIL: URL error: {exc.reason}") from exc
    # Timeout while reading the body
    except TimeoutError as exc:
        raise RSSFetchError("RSS_FETCH_FAIL: timeout", error_code=FETCH_TIMEOUT) from exc
    # Dropped or truncated connections (RemoteDisconnected, IncompleteRead, ConnectionResetError)
    except (http.client.HTTPException, OSError) as exc:
        raise RSSFetchError(f"RSS_FETCH_FAIL: connection error: {exc!r}") from exc


def retrieve_feed(url: str, *, timeout_s: float = 10.0) -> list[FeedItem]:
    """
    Fetch and parse a feed in one step (a single HTTP attempt).

    Raises RSSFetchError (with error_code) when the fetch fails and
    RSSParseError when the body is not valid RSS.
    """
    return parse_rss(fetch_rss(url, timeout_s=timeout_s))
