# backend/puzzle_tracker/api/dto/puzzle_log.py
# DTOs des routes « mes puzzles » et du changement de statut.

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from puzzle_tracker.api.dto.feed import FeedItemOut
from puzzle_tracker.models.puzzle_log import PuzzleLog
from puzzle_tracker.models.status import PuzzleStatus
from puzzle_tracker.services.puzzle_logs.duration_parser import format_duration
from puzzle_tracker.shared.constants import NOTES_MAX_LENGTH, RATING_MAX, RATING_MIN


class PuzzleLogOut(BaseModel):
    """Représentation publique d'un PuzzleLog."""

    id: str
    user_id: str
    puzzle_id: str
    status: PuzzleStatus
    progress_percentage: int
    difficulty_rating: Optional[int] = None
    user_rating: Optional[int] = None
    time_spent_seconds: Optional[int] = None
    time_spent_display: Optional[str] = Field(None, description="Temps passé formaté (ex. 2h 30m)")
    notes: Optional[str] = None
    photos: list[str] = Field(default_factory=list)
    private: bool = False
    started_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    # Métadonnées puzzle (listes uniquement)
    title: Optional[str] = None
    brand: Optional[str] = None
    pieces: Optional[int] = None

    @classmethod
    def from_log(cls, log: PuzzleLog) -> "PuzzleLogOut":
        data = log.model_dump(exclude={"id"})
        data["id"] = str(log.id)
        if log.time_spent_seconds:
            data["time_spent_display"] = format_duration(log.time_spent_seconds)
        return cls.model_validate(data)


class StatusChangeIn(BaseModel):
    """Corps de PATCH /puzzle-status."""

    puzzle_id: str = Field(..., min_length=1, description="Identifiant du puzzle")
    new_status: str = Field(..., description="wishlist|library|in-progress|completed|abandoned")
    progress_percentage: Optional[int] = Field(None, description="Progression 0–100")
    completion_time: Optional[str] = Field(
        None, description="Durée libre (ex. « 2h 30m », « 90m », « 1.5h », « 45 » = minutes)"
    )
    time_spent_seconds: Optional[int] = Field(None, description="Durée en secondes")
    media_urls: list[str] = Field(default_factory=list, description="Photos jointes")


class StatusChangeOut(BaseModel):
    success: bool = True
    created: bool
    log: PuzzleLogOut
    feed_item: Optional[FeedItemOut] = None


class PuzzleLogCreateIn(BaseModel):
    """Corps de POST /my/puzzles."""

    puzzle_id: str = Field(..., min_length=1)
    status: str = Field("wishlist", description="Statut initial")
    progress_percentage: Optional[int] = None
    completion_time: Optional[str] = None
    time_spent_seconds: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)
    difficulty_rating: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    user_rating: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    photos: list[str] = Field(default_factory=list)
    private: bool = False


class PuzzleLogPatchIn(BaseModel):
    """Corps de PATCH /my/puzzles/{log_id} (champs absents = inchangés)."""

    status: Optional[str] = None
    progress_percentage: Optional[int] = None
    completion_time: Optional[str] = None
    time_spent_seconds: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)
    difficulty_rating: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    user_rating: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    photos: Optional[list[str]] = None
    private: Optional[bool] = None


class PuzzleLogMutationOut(BaseModel):
    log: PuzzleLogOut
    feed_item: Optional[FeedItemOut] = None


class PuzzleLogListResponse(BaseModel):
    items: list[PuzzleLogOut]
    page: int
    page_size: int
    nb_pages: int
    total: int


class PuzzleLogCheckOut(BaseModel):
    exists: bool
    log: Optional[PuzzleLogOut] = None
