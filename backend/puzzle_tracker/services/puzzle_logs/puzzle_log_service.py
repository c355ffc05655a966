# backend/puzzle_tracker/services/puzzle_logs/puzzle_log_service.py
# Service principal « mes puzzles » : changement de statut, création, édition et lecture des logs.

from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from puzzle_tracker.core.errors import PuzzleLogExistsError, PuzzleLogNotFoundError, ValidationError
from puzzle_tracker.core.logging_config import get_loggers
from puzzle_tracker.core.utils import utcnow
from puzzle_tracker.models.feed_item import FeedItem
from puzzle_tracker.models.puzzle_log import PuzzleLog, UserPuzzle
from puzzle_tracker.models.status import PuzzleStatus, parse_status
from puzzle_tracker.services.feed.feed_service import FeedService

from .duration_parser import parse_duration
from .puzzle_log_store import PuzzleLogStore
from .transition_validator import TransitionValidator

# Champs éditables hors statut (PATCH d'un log)
EDITABLE_FIELDS = {"notes", "difficulty_rating", "user_rating", "photos", "private"}
# Champs non effaçables : null vaut « inchangé »
NON_NULLABLE_FIELDS = {"photos", "private"}


class PuzzleLogService:
    """Service principal de gestion des PuzzleLogs.

    Description:
        Enchaîne, pour chaque changement : lecture de la durée saisie, validation de la
        transition, persistance du log, puis publication éventuelle d'un item de feed.
        Chaque appel est indépendant ; aucune reprise ni contrôle de concurrence.
    """

    def __init__(
        self,
        store: PuzzleLogStore,
        validator: TransitionValidator,
        feed: FeedService,
    ):
        self.store = store
        self.validator = validator
        self.feed = feed

    async def change_status(
        self,
        user_id: str,
        puzzle_id: str,
        new_status: PuzzleStatus | str,
        *,
        progress: int | None = None,
        completion_time: str | None = None,
        time_spent_seconds: int | None = None,
        media_urls: Sequence[str] | None = None,
    ) -> tuple[PuzzleLog, FeedItem | None, bool]:
        """Attribuer un statut à un puzzle (crée le log à la première attribution).

        Args:
            user_id: Identifiant de l'utilisateur.
            puzzle_id: Identifiant du puzzle.
            new_status: Statut demandé.
            progress: Progression demandée.
            completion_time: Durée libre (« 2h 30m »), prioritaire sur `time_spent_seconds`.
            time_spent_seconds: Durée en secondes.
            media_urls: Photos jointes.

        Returns:
            tuple: (log persisté, item de feed ou None, créé ?).

        Raises:
            ValidationError: Transition invalide.
        """
        status = parse_status(new_status)
        seconds = self._resolve_time_spent(completion_time, time_spent_seconds)

        current = await self.store.find_log_by_puzzle(user_id, puzzle_id)
        created = current is None
        old_status = None if created else current.status
        if created:
            now = utcnow()
            current = PuzzleLog(user_id=user_id, puzzle_id=puzzle_id, created_at=now, updated_at=now)

        updated = self.validator.validate_transition(
            current, status, progress, time_spent_seconds=seconds
        )
        if media_urls:
            updated = updated.model_copy(update={"photos": [*updated.photos, *media_urls]})

        saved = await self.store.insert_log(updated) if created else await self.store.save_log(updated)

        logger, _, data_logger = get_loggers()
        logger.info(
            f"Puzzle log {saved.id}: {old_status.value if old_status else 'new'} -> {saved.status.value}"
        )
        data_logger.log_data(
            "puzzle_status_change",
            {
                "puzzle_log_id": saved.id,
                "puzzle_id": puzzle_id,
                "old_status": old_status,
                "new_status": saved.status,
                "progress_percentage": saved.progress_percentage,
            },
            {"user_id": user_id},
        )

        unchanged = (
            not created
            and saved.status is old_status
            and saved.progress_percentage == current.progress_percentage
        )
        if unchanged and not media_urls:
            return saved, None, created

        feed_item = await self.feed.publish_transition(saved, old_status, media_urls, seconds)
        return saved, feed_item, created

    async def create_log(self, user_id: str, data: dict[str, Any]) -> tuple[PuzzleLog, FeedItem | None]:
        """Créer un log complet (statut + détails) ; refusé si un log existe déjà.

        Raises:
            PuzzleLogExistsError: Log déjà présent pour ce puzzle.
            ValidationError: Transition invalide.
        """
        puzzle_id = data["puzzle_id"]
        if await self.store.find_log_by_puzzle(user_id, puzzle_id) is not None:
            raise PuzzleLogExistsError("Log already exists for this puzzle. Use PATCH to update.")

        now = utcnow()
        details = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
        draft = self._with_details(
            PuzzleLog(user_id=user_id, puzzle_id=puzzle_id, created_at=now, updated_at=now), details
        )
        seconds = self._resolve_time_spent(data.get("completion_time"), data.get("time_spent_seconds"))
        log = self.validator.validate_transition(
            draft, data.get("status") or PuzzleStatus.WISHLIST, data.get("progress_percentage"),
            time_spent_seconds=seconds,
        )
        if seconds is not None:
            log = log.model_copy(update={"time_spent_seconds": self.validator.check_time_spent(seconds)})

        saved = await self.store.insert_log(log)
        get_loggers()[0].info(f"Puzzle log {saved.id} created with status {saved.status.value}")
        feed_item = await self.feed.publish_transition(saved, None, saved.photos, seconds)
        return saved, feed_item

    async def update_log(
        self, user_id: str, log_id: str, patch: dict[str, Any]
    ) -> tuple[PuzzleLog, FeedItem | None]:
        """Modifier un log (détails, progression, temps, statut éventuel).

        Description:
            Les nouvelles photos et les changements de progression passent par le
            classifieur : une mise à jour photo ou un palier de progression produit un
            item de feed sans changement de statut.

        Raises:
            PuzzleLogNotFoundError: Log inexistant ou d'un autre utilisateur.
            ValidationError: Valeur invalide.
        """
        current = await self.get_log(user_id, log_id)
        old_status = current.status

        details = {
            k: v
            for k, v in patch.items()
            if k in EDITABLE_FIELDS and not (k in NON_NULLABLE_FIELDS and v is None)
        }
        new_photos = [url for url in details.get("photos") or [] if url not in current.photos]
        draft = self._with_details(current, details)

        seconds = self._resolve_time_spent(patch.get("completion_time"), patch.get("time_spent_seconds"))
        log = self.validator.validate_transition(
            draft,
            current.status if patch.get("status") is None else patch["status"],
            patch.get("progress_percentage"),
            time_spent_seconds=seconds,
        )
        if seconds is not None:
            log = log.model_copy(update={"time_spent_seconds": self.validator.check_time_spent(seconds)})

        saved = await self.store.save_log(log)
        get_loggers()[0].info(f"Puzzle log {saved.id} updated ({', '.join(sorted(patch))})")

        progress_changed = saved.progress_percentage != current.progress_percentage
        if saved.status is old_status and not new_photos and not progress_changed:
            return saved, None
        feed_item = await self.feed.publish_transition(saved, old_status, new_photos, seconds)
        return saved, feed_item

    async def get_log(self, user_id: str, log_id: str) -> PuzzleLog:
        """Détail d'un log de l'utilisateur.

        Raises:
            PuzzleLogNotFoundError: Log inexistant ou d'un autre utilisateur.
        """
        log = await self.store.get_log(user_id, log_id)
        if log is None:
            raise PuzzleLogNotFoundError(f"Puzzle log {log_id} not found")
        return log

    async def check_log(self, user_id: str, puzzle_id: str) -> PuzzleLog | None:
        """Log de l'utilisateur pour ce puzzle, None s'il n'en a pas."""
        return await self.store.find_log_by_puzzle(user_id, puzzle_id)

    async def list_logs(
        self,
        user_id: str,
        status: PuzzleStatus | str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> dict[str, Any]:
        """Lister les logs avec pagination et filtre de statut.

        Returns:
            dict: items, page, page_size, nb_pages, total.
        """
        status_filter = parse_status(status) if status else None
        skip = (page - 1) * page_size
        items, total = await self.store.list_logs(user_id, status_filter, skip=skip, limit=page_size)
        return {
            "items": items,
            "page": page,
            "page_size": page_size,
            "nb_pages": (total + page_size - 1) // page_size,
            "total": total,
        }

    async def list_user_puzzles(self, user_id: str) -> list[UserPuzzle]:
        return await self.store.list_user_puzzles(user_id)

    @staticmethod
    def _resolve_time_spent(completion_time: str | None, time_spent_seconds: int | None) -> int | None:
        # Saisie libre prioritaire ; 0 signifie « non renseigné »
        if completion_time:
            seconds = parse_duration(completion_time)
            return seconds or None
        if time_spent_seconds:
            return time_spent_seconds
        return None

    @staticmethod
    def _with_details(log: PuzzleLog, details: dict[str, Any]) -> PuzzleLog:
        """Appliquer des champs éditables en revalidant le modèle (notes 1–5, etc.)."""
        if not details:
            return log
        try:
            return PuzzleLog.model_validate({**log.model_dump(), **details})
        except PydanticValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(messages) from e
