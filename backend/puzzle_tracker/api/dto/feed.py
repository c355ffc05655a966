# backend/puzzle_tracker/api/dto/feed.py
# DTOs du feed d'activité

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from puzzle_tracker.models.feed_item import FeedItem
from puzzle_tracker.models.status import FeedItemType


class FeedItemOut(BaseModel):
    id: str
    user_id: str
    type: FeedItemType
    target_puzzle_id: Optional[str] = None
    target_puzzle_log_id: Optional[str] = None
    text: Optional[str] = None
    media_urls: list[str] = Field(default_factory=list)
    created_at: dt.datetime

    @classmethod
    def from_item(cls, item: FeedItem) -> "FeedItemOut":
        data = item.model_dump(exclude={"id", "target_puzzle_log_id"})
        data["id"] = str(item.id)
        if item.target_puzzle_log_id is not None:
            data["target_puzzle_log_id"] = str(item.target_puzzle_log_id)
        return cls.model_validate(data)


class ActivityListResponse(BaseModel):
    items: list[FeedItemOut]
    page: int
    page_size: int
    nb_pages: int
    total: int
