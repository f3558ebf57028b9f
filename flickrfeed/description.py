"""Pull the thumbnail and text fragments out of a feed item's description.

The feed's description is a run of <p> paragraphs:

    <p><a href="...">owner</a> posted a photo:</p>
    <p><a href="..." title="..."><img src="..." width="240" height="180" alt="..." /></a></p>
    <p>photo description</p>

Splitting on the literal "<p>" gives segment 0 (text before the first
paragraph), 1 (the "posted a photo" line), 2 (the linked thumbnail) and
3 (the description). This depends on the provider's exact markup; keep
all knowledge of it in this module.
"""
from __future__ import annotations

PARAGRAPH_OPEN = "<p>"
PARAGRAPH_CLOSE = "</p>"

THUMBNAIL_SEGMENT = 2
TEXT_SEGMENT = 3


def description_segment(description: str | None, index: int) -> str | None:
    """Return segment `index` of the description split on "<p>", or None if absent."""
    if not description:
        return None
    parts = description.split(PARAGRAPH_OPEN)
    if index >= len(parts):
        return None
    return parts[index].replace(PARAGRAPH_CLOSE, "").strip()


def extract_thumbnail(description: str | None) -> str | None:
    """Linked thumbnail markup (<a ...><img ...></a>), or None."""
    fragment = description_segment(description, THUMBNAIL_SEGMENT)
    return fragment or None


def extract_text(description: str | None) -> str | None:
    return description_segment(description, TEXT_SEGMENT)
