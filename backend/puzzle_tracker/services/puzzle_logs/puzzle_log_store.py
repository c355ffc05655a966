# backend/puzzle_tracker/services/puzzle_logs/puzzle_log_store.py
# Accès Mongo aux puzzle logs et aux items de feed (collaborateur de persistance).

from __future__ import annotations

from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from puzzle_tracker.core.bson_utils import dump_mongo, to_object_id
from puzzle_tracker.models.feed_item import FeedItem
from puzzle_tracker.models.puzzle_log import PuzzleLog, UserPuzzle
from puzzle_tracker.models.status import PuzzleStatus


class PuzzleLogStore:
    """Stockage des PuzzleLogs et FeedItems.

    Description:
        Enveloppe fine autour des collections `puzzle_logs`, `feed_items` et `puzzles`.
        Aucune règle métier ici : la validation est faite en amont, et les erreurs du
        driver remontent telles quelles à l'appelant.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialiser le stockage.

        Args:
            db: Instance de base de données MongoDB.
        """
        self.db = db

    # --- puzzle_logs -----------------------------------------------------

    async def find_log_by_puzzle(self, user_id: str, puzzle_id: str) -> PuzzleLog | None:
        """Log de l'utilisateur pour un puzzle, None s'il n'existe pas."""
        doc = await self.db.puzzle_logs.find_one({"user_id": user_id, "puzzle_id": puzzle_id})
        return PuzzleLog.from_document(doc) if doc else None

    async def get_log(self, user_id: str, log_id: str | ObjectId) -> PuzzleLog | None:
        """Log par identifiant, restreint à son propriétaire."""
        oid = to_object_id(log_id)
        if oid is None:
            return None
        doc = await self.db.puzzle_logs.find_one({"_id": oid, "user_id": user_id})
        return PuzzleLog.from_document(doc) if doc else None

    async def insert_log(self, log: PuzzleLog) -> PuzzleLog:
        """Insérer un nouveau log et retourner sa version identifiée."""
        doc = dump_mongo(log)
        doc.pop("_id", None)
        result = await self.db.puzzle_logs.insert_one(doc)
        return log.model_copy(update={"id": result.inserted_id})

    async def save_log(self, log: PuzzleLog) -> PuzzleLog:
        """Réécrire un log existant (dernier écrit gagnant)."""
        doc = dump_mongo(log, exclude_none=False)
        log_id = doc.pop("_id")
        # Champs immuables
        doc.pop("user_id", None)
        doc.pop("puzzle_id", None)
        doc.pop("created_at", None)
        updated = await self.db.puzzle_logs.find_one_and_update(
            {"_id": log_id, "user_id": log.user_id},
            {"$set": doc},
            return_document=ReturnDocument.AFTER,
        )
        return PuzzleLog.from_document(updated) if updated else log

    async def list_logs(
        self,
        user_id: str,
        status: PuzzleStatus | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[UserPuzzle], int]:
        """Logs paginés de l'utilisateur (plus récents d'abord) et total filtré."""
        match: dict[str, Any] = {"user_id": user_id}
        if status is not None:
            match["status"] = status.value

        total = await self.db.puzzle_logs.count_documents(match)
        pipeline = self._user_puzzles_pipeline(match)
        pipeline.extend([{"$skip": skip}, {"$limit": limit}])

        items = [UserPuzzle.from_document(doc) async for doc in self.db.puzzle_logs.aggregate(pipeline)]
        return items, total

    async def list_user_puzzles(self, user_id: str) -> list[UserPuzzle]:
        """Tous les logs de l'utilisateur, enrichis (titre, marque, pièces)."""
        pipeline = self._user_puzzles_pipeline({"user_id": user_id})
        return [UserPuzzle.from_document(doc) async for doc in self.db.puzzle_logs.aggregate(pipeline)]

    @staticmethod
    def _user_puzzles_pipeline(match: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            {"$match": match},
            {"$sort": {"updated_at": DESCENDING}},
            # puzzle_id est opaque (chaîne) : comparaison sur la forme texte de _id
            {
                "$lookup": {
                    "from": "puzzles",
                    "let": {"pid": "$puzzle_id"},
                    "pipeline": [
                        {"$match": {"$expr": {"$eq": [{"$toString": "$_id"}, "$$pid"]}}},
                        {"$project": {"title": 1, "brand": 1, "piece_count": 1}},
                    ],
                    "as": "puzzle",
                }
            },
            {"$unwind": {"path": "$puzzle", "preserveNullAndEmptyArrays": True}},
            {
                "$addFields": {
                    "title": "$puzzle.title",
                    "brand": {"$ifNull": ["$puzzle.brand", "Unknown"]},
                    "pieces": "$puzzle.piece_count",
                }
            },
            {"$project": {"puzzle": 0}},
        ]

    # --- feed_items ------------------------------------------------------

    async def insert_feed_item(self, item: FeedItem) -> FeedItem:
        doc = dump_mongo(item)
        doc.pop("_id", None)
        result = await self.db.feed_items.insert_one(doc)
        return item.model_copy(update={"id": result.inserted_id})

    async def list_feed_items(
        self, user_id: str, skip: int = 0, limit: int = 50
    ) -> tuple[list[FeedItem], int]:
        """Items de feed d'un utilisateur, plus récents d'abord, et total."""
        query = {"user_id": user_id}
        total = await self.db.feed_items.count_documents(query)
        cursor = (
            self.db.feed_items.find(query)
            .sort("created_at", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        items = [FeedItem.model_validate(doc) async for doc in cursor]
        return items, total
