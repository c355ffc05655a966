# backend/puzzle_tracker/api/deps.py
# Construction des services (injection de dépendances FastAPI).

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from puzzle_tracker.core.settings import Settings, get_settings
from puzzle_tracker.db.mongodb import get_db
from puzzle_tracker.services.feed.feed_classifier import FeedEventClassifier
from puzzle_tracker.services.feed.feed_service import FeedService
from puzzle_tracker.services.puzzle_logs.puzzle_log_service import PuzzleLogService
from puzzle_tracker.services.puzzle_logs.puzzle_log_store import PuzzleLogStore
from puzzle_tracker.services.puzzle_logs.transition_validator import TransitionValidator


def get_store(db: Annotated[AsyncIOMotorDatabase, Depends(get_db)]) -> PuzzleLogStore:
    return PuzzleLogStore(db)


def get_feed_service(
    store: Annotated[PuzzleLogStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FeedService:
    classifier = FeedEventClassifier(
        suppress_minor_transitions=settings.suppress_minor_transitions
    )
    return FeedService(store, classifier, enabled=settings.feed_enabled)


def get_puzzle_log_service(
    store: Annotated[PuzzleLogStore, Depends(get_store)],
    feed: Annotated[FeedService, Depends(get_feed_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PuzzleLogService:
    validator = TransitionValidator(
        restart_resets_started_at=settings.restart_resets_started_at
    )
    return PuzzleLogService(store, validator, feed)


Store = Annotated[PuzzleLogStore, Depends(get_store)]
Feed = Annotated[FeedService, Depends(get_feed_service)]
PuzzleLogs = Annotated[PuzzleLogService, Depends(get_puzzle_log_service)]
AppSettings = Annotated[Settings, Depends(get_settings)]
