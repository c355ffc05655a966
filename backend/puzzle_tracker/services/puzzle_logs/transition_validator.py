# backend/puzzle_tracker/services/puzzle_logs/transition_validator.py
# Cohérence statut/progression lors d'un changement de statut d'un PuzzleLog.

from __future__ import annotations

import datetime as dt
from typing import Any, Callable

from puzzle_tracker.core.errors import ValidationError
from puzzle_tracker.core.utils import utcnow
from puzzle_tracker.models.puzzle_log import PuzzleLog
from puzzle_tracker.models.status import PuzzleStatus, parse_status
from puzzle_tracker.shared.constants import PROGRESS_MAX, PROGRESS_MIN


class TransitionValidator:
    """Validation des transitions de statut.

    Description:
        Produit le nouvel état d'un log à partir de l'état courant et du statut demandé,
        sans rien persister :
        - `completed` force 100 % et date `completed_at` à l'entrée dans le statut;
        - `wishlist` force 0 %;
        - `library`, `in-progress`, `abandoned` acceptent la progression fournie
          (inchangée par défaut), bornée à [0, 100];
        - entrer en `in-progress` date `started_at` s'il n'est pas déjà renseigné;
        - `updated_at` est toujours rafraîchi.

    Args:
        restart_resets_started_at (bool): Si vrai, `abandoned → in-progress` redémarre
            le chronomètre (`started_at = now`).
        clock (Callable[[], datetime]): Source de temps (UTC aware).
    """

    def __init__(
        self,
        restart_resets_started_at: bool = False,
        clock: Callable[[], dt.datetime] = utcnow,
    ):
        self.restart_resets_started_at = restart_resets_started_at
        self.clock = clock

    def validate_transition(
        self,
        current: PuzzleLog,
        new_status: PuzzleStatus | str,
        new_progress: int | None = None,
        *,
        time_spent_seconds: int | None = None,
    ) -> PuzzleLog:
        """Calculer l'état d'un log après changement de statut.

        Args:
            current: Log courant (tel que stocké, ou log neuf en `wishlist`).
            new_status: Statut demandé.
            new_progress: Progression demandée (ignorée pour completed/wishlist).
            time_spent_seconds: Temps passé, enregistré à l'achèvement.

        Returns:
            PuzzleLog: Nouvel état du log.

        Raises:
            ValidationError: Statut hors vocabulaire, progression hors [0,100],
                temps négatif.
        """
        status = parse_status(new_status)
        now = self.clock()
        update: dict[str, Any] = {"status": status, "updated_at": now}

        if status is PuzzleStatus.COMPLETED:
            update["progress_percentage"] = PROGRESS_MAX
            if current.status is not PuzzleStatus.COMPLETED or current.completed_at is None:
                update["completed_at"] = now
            if time_spent_seconds is not None:
                update["time_spent_seconds"] = self.check_time_spent(time_spent_seconds)

        elif status is PuzzleStatus.WISHLIST:
            update["progress_percentage"] = PROGRESS_MIN

        else:
            progress = current.progress_percentage if new_progress is None else new_progress
            update["progress_percentage"] = self.check_progress(progress)

        if status is PuzzleStatus.IN_PROGRESS and current.status is not PuzzleStatus.IN_PROGRESS:
            restarting = (
                self.restart_resets_started_at and current.status is PuzzleStatus.ABANDONED
            )
            if current.started_at is None or restarting:
                update["started_at"] = now

        return current.model_copy(update=update)

    @staticmethod
    def check_progress(progress: Any) -> int:
        """Valider une progression (entier dans [0, 100])."""
        if isinstance(progress, bool) or not isinstance(progress, int):
            raise ValidationError(f"Progress must be an integer, got {progress!r}")
        if not PROGRESS_MIN <= progress <= PROGRESS_MAX:
            raise ValidationError(
                f"Progress must be between {PROGRESS_MIN} and {PROGRESS_MAX}, got {progress}"
            )
        return progress

    @staticmethod
    def check_time_spent(seconds: Any) -> int:
        """Valider un temps passé (entier ≥ 0)."""
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise ValidationError(f"Time spent must be an integer, got {seconds!r}")
        if seconds < 0:
            raise ValidationError(f"Time spent cannot be negative, got {seconds}")
        return seconds
