# backend/puzzle_tracker/models/feed_item.py
# Événement de feed (classification d'une transition) et item de feed persistant.

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from puzzle_tracker.core.bson_utils import MongoBaseModel, PyObjectId
from puzzle_tracker.core.utils import utcnow
from puzzle_tracker.models.status import FeedItemType


class FeedEvent(BaseModel):
    """Résultat du classifieur : type + texte, sans identité ni persistance."""

    type: FeedItemType
    text: str
    media_urls: list[str] = Field(default_factory=list)


class FeedItem(MongoBaseModel):
    """Document Mongo « FeedItem » (append-only, jamais modifié après création)."""

    user_id: str
    type: FeedItemType
    target_puzzle_id: Optional[str] = None
    target_puzzle_log_id: Optional[PyObjectId] = None
    text: Optional[str] = None
    media_urls: list[str] = Field(default_factory=list)
    created_at: dt.datetime = Field(default_factory=utcnow)
