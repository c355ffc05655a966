# backend/tests/conftest.py
# Fixtures communes : stockage en mémoire, horloge figée, client HTTP avec utilisateur simulé.

import datetime as dt
import os
import random
import tempfile

# Avant tout import de puzzle_tracker (settings mis en cache au premier appel)
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="puzzle-tracker-logs-"))
os.environ.setdefault("ENSURE_INDEXES_ON_STARTUP", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from puzzle_tracker.api.deps import get_store
from puzzle_tracker.main import app
from puzzle_tracker.models.feed_item import FeedItem
from puzzle_tracker.models.puzzle_log import PuzzleLog, UserPuzzle
from puzzle_tracker.services.feed.feed_classifier import FeedEventClassifier
from puzzle_tracker.services.feed.feed_service import FeedService
from puzzle_tracker.services.puzzle_logs.puzzle_log_service import PuzzleLogService
from puzzle_tracker.services.puzzle_logs.puzzle_log_store import PuzzleLogStore
from puzzle_tracker.services.puzzle_logs.transition_validator import TransitionValidator

FROZEN_NOW = dt.datetime(2024, 6, 12, 15, 30, tzinfo=dt.timezone.utc)
USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


class InMemoryPuzzleLogStore(PuzzleLogStore):
    """Stockage en mémoire, même contrat que la version Mongo."""

    def __init__(self):
        super().__init__(db=None)
        self.logs: dict[ObjectId, PuzzleLog] = {}
        self.feed_items: list[FeedItem] = []
        # puzzle_id -> métadonnées (collection `puzzles`)
        self.puzzles: dict[str, dict] = {}

    async def find_log_by_puzzle(self, user_id, puzzle_id):
        for log in self.logs.values():
            if log.user_id == user_id and log.puzzle_id == puzzle_id:
                return log
        return None

    async def get_log(self, user_id, log_id):
        log = self.logs.get(ObjectId(log_id)) if ObjectId.is_valid(str(log_id)) else None
        if log is None or log.user_id != user_id:
            return None
        return log

    async def insert_log(self, log):
        saved = log.model_copy(update={"id": ObjectId()})
        self.logs[saved.id] = saved
        return saved

    async def save_log(self, log):
        stored = self.logs.get(log.id)
        if stored is None or stored.user_id != log.user_id:
            return log
        saved = log.model_copy(
            update={
                "user_id": stored.user_id,
                "puzzle_id": stored.puzzle_id,
                "created_at": stored.created_at,
            }
        )
        self.logs[saved.id] = saved
        return saved

    async def list_logs(self, user_id, status=None, skip=0, limit=50):
        items = [p for p in await self.list_user_puzzles(user_id) if status is None or p.status is status]
        return items[skip : skip + limit], len(items)

    async def list_user_puzzles(self, user_id):
        logs = sorted(
            (log for log in self.logs.values() if log.user_id == user_id),
            key=lambda log: log.updated_at,
            reverse=True,
        )
        return [self._enrich(log) for log in logs]

    def _enrich(self, log):
        meta = self.puzzles.get(log.puzzle_id, {})
        return UserPuzzle(
            **log.model_dump(include=set(PuzzleLog.model_fields)),
            title=meta.get("title"),
            brand=meta.get("brand") or "Unknown",
            pieces=meta.get("piece_count"),
        )

    async def insert_feed_item(self, item):
        saved = item.model_copy(update={"id": ObjectId()})
        self.feed_items.append(saved)
        return saved

    async def list_feed_items(self, user_id, skip=0, limit=50):
        items = sorted(
            (item for item in self.feed_items if item.user_id == user_id),
            key=lambda item: item.created_at,
            reverse=True,
        )
        return items[skip : skip + limit], len(items)


@pytest.fixture
def store():
    return InMemoryPuzzleLogStore()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def clock():
    return lambda: FROZEN_NOW


@pytest.fixture
def classifier(rng):
    return FeedEventClassifier(rng=rng)


@pytest.fixture
def validator(clock):
    return TransitionValidator(clock=clock)


@pytest.fixture
def feed_service(store, classifier):
    return FeedService(store, classifier)


@pytest.fixture
def service(store, validator, feed_service):
    return PuzzleLogService(store, validator, feed_service)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    c = TestClient(app, headers={"X-User-Id": USER_ID})
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(store):
    app.dependency_overrides[get_store] = lambda: store
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
