# flickrfeed/rss_parse.py
from __future__ import annotations

from email.utils import parsedate_to_datetime
import xml.etree.ElementTree as ET

from flickrfeed.error_codes import PARSE_ERROR
from flickrfeed.schemas import FeedItem


class RSSParseError(ValueError):
    """Raised when RSS XML cannot be parsed (maps to PARSE_ERROR)."""

    error_code = PARSE_ERROR


def parse_rss(xml: str) -> list[FeedItem]:
    """
    Convert an RSS 2.0 XML document (string) into FeedItem objects.

    Rules:
    - Parse <item> elements under <channel>
    - link required, title may be empty (untitled photos)
    - pubDate required + must parse, else skip the item
    - description kept as raw HTML (the feed escapes it, ElementTree unescapes it)
    - Preserve feed order (most recent first, as delivered)
    - Malformed XML or a missing <channel> -> raise RSSParseError
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise RSSParseError(f"RSS_PARSE_FAIL: malformed XML: {exc}") from exc

    channel = root.find("./channel")
    if channel is None:
        raise RSSParseError("RSS_PARSE_FAIL: no <channel> element")

    out: list[FeedItem] = []

    def text_of(elem: ET.Element, path: str) -> str | None:
        found = elem.find(path)
        if found is None or found.text is None:
            return None
        text = found.text.strip()
        return text if text else None

    for it in channel.findall("item"):
        title = text_of(it, "title")
        link = text_of(it, "link")
        pub = text_of(it, "pubDate")
        description = text_of(it, "description") or ""

        if link is None or pub is None:
            continue

        try:
            published_at = parsedate_to_datetime(pub)
        except (TypeError, ValueError):
            continue

        out.append(
            FeedItem(
                title=title or "",
                link=link,
                published_at=published_at,
                description=description,
            )
        )

    return out
