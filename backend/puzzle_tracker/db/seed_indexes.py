# backend/puzzle_tracker/db/seed_indexes.py
"""
Idempotent index seeding for the puzzle tracker.

- puzzle_logs: one log per (user_id, puzzle_id), plus a listing index by status.
- feed_items: user activity, newest first.
- create_indexes() is a no-op for indexes that already exist with the same definition.
"""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.operations import IndexModel

from puzzle_tracker.db.mongodb import get_collection

INDEXES: dict[str, list[IndexModel]] = {
    "puzzle_logs": [
        IndexModel(
            [("user_id", ASCENDING), ("puzzle_id", ASCENDING)],
            name="uniq_user_puzzle",
            unique=True,
        ),
        IndexModel(
            [("user_id", ASCENDING), ("status", ASCENDING), ("updated_at", DESCENDING)],
            name="user_status_updated",
        ),
    ],
    "feed_items": [
        IndexModel(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="user_created",
        ),
    ],
}


async def ensure_indexes() -> dict[str, list[str]]:
    """Créer les index manquants.

    Returns:
        dict: Noms d'index par collection.
    """
    created: dict[str, list[str]] = {}
    for coll_name, models in INDEXES.items():
        coll = await get_collection(coll_name)
        created[coll_name] = await coll.create_indexes(models)
    return created
