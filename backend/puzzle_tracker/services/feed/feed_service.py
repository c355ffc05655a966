# backend/puzzle_tracker/services/feed/feed_service.py
# Publication des items de feed issus des transitions de puzzle logs, et lecture de l'activité.

from __future__ import annotations

from typing import Any, Sequence

from puzzle_tracker.core.logging_config import get_loggers
from puzzle_tracker.models.feed_item import FeedItem
from puzzle_tracker.models.puzzle_log import PuzzleLog
from puzzle_tracker.models.status import PuzzleStatus
from puzzle_tracker.services.puzzle_logs.puzzle_log_store import PuzzleLogStore

from .feed_classifier import FeedEventClassifier


class FeedService:
    """Service du feed d'activité.

    Description:
        Classe la transition d'un log puis persiste au plus un item de feed.
        Les erreurs de stockage ne sont pas absorbées : elles remontent à l'appelant.
    """

    def __init__(
        self,
        store: PuzzleLogStore,
        classifier: FeedEventClassifier,
        enabled: bool = True,
    ):
        self.store = store
        self.classifier = classifier
        self.enabled = enabled

    async def publish_transition(
        self,
        log: PuzzleLog,
        old_status: PuzzleStatus | None,
        media_urls: Sequence[str] | None = None,
        time_spent_seconds: int | None = None,
    ) -> FeedItem | None:
        """Publier l'item de feed correspondant à une transition.

        Args:
            log: Log après transition (persisté, donc identifié).
            old_status: Statut avant transition (None pour un log neuf).
            media_urls: Photos jointes à la mise à jour.
            time_spent_seconds: Temps de résolution saisi avec l'achèvement.

        Returns:
            FeedItem | None: Item créé, None si rien à diffuser.
        """
        if not self.enabled:
            return None

        event = self.classifier.classify(
            old_status,
            log.status,
            log.progress_percentage,
            media_urls,
            time_spent_seconds=time_spent_seconds,
        )
        if event is None:
            return None

        item = await self.store.insert_feed_item(
            FeedItem(
                user_id=log.user_id,
                type=event.type,
                target_puzzle_id=log.puzzle_id,
                target_puzzle_log_id=log.id,
                text=event.text,
                media_urls=event.media_urls,
            )
        )

        logger, _, data_logger = get_loggers()
        logger.info(f"Feed item {item.id} ({item.type.value}) for log {log.id}")
        data_logger.log_data(
            "feed_item_created",
            {
                "feed_item_id": item.id,
                "type": item.type,
                "old_status": old_status,
                "new_status": log.status,
                "puzzle_log_id": log.id,
            },
            {"user_id": log.user_id},
        )
        return item

    async def list_activity(self, user_id: str, page: int = 1, page_size: int = 50) -> dict[str, Any]:
        """Activité paginée d'un utilisateur (plus récente d'abord)."""
        skip = (page - 1) * page_size
        items, total = await self.store.list_feed_items(user_id, skip=skip, limit=page_size)
        return {
            "items": items,
            "page": page,
            "page_size": page_size,
            "nb_pages": (total + page_size - 1) // page_size,
            "total": total,
        }
