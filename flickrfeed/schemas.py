from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from flickrfeed.config import DEFAULT_CACHE_TIME


class FeedItem(BaseModel):
    """One <item> of the public photo feed. Never mutated after parse."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    published_at: datetime
    description: str = ""


# Serializer for the cached blob (the whole list is one row)
FeedItemList = TypeAdapter(list[FeedItem])


class FeedConfig(BaseModel):
    user_id: str = ""
    cache_ttl_seconds: int = DEFAULT_CACHE_TIME


class OptionsSaveRequest(BaseModel):
    user_id: str | None = None
    cache_time: int | None = Field(default=None, ge=0)
    cache_clear: bool = False


class FeedItemView(BaseModel):
    title: str
    url: str
    date: str
    thumbnail: str | None
    description_text: str | None
