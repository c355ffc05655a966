# backend/puzzle_tracker/models/puzzle_log.py
# Relation d'un utilisateur à un puzzle (statut, progression, notes, notes de difficulté, photos).

from __future__ import annotations

import datetime as dt
from typing import Any, Mapping, Optional

from pydantic import Field

from puzzle_tracker.core.bson_utils import MongoBaseModel
from puzzle_tracker.core.utils import utcnow
from puzzle_tracker.models.status import PuzzleStatus, derive_legacy_status
from puzzle_tracker.shared.constants import PROGRESS_MAX, PROGRESS_MIN, RATING_MAX, RATING_MIN


class PuzzleLog(MongoBaseModel):
    """Document Mongo « PuzzleLog ».

    Description:
        Un log par couple (utilisateur, puzzle), créé à la première attribution de
        statut et jamais supprimé (on passe en `abandoned`). Le statut et la
        progression ne doivent jamais se contredire : `wishlist` implique 0 %,
        `completed` implique 100 %. Ces règles sont appliquées par
        `TransitionValidator`, pas par le modèle.

    Attributes:
        user_id (str): Identifiant opaque fourni par le fournisseur d'identité.
        puzzle_id (str): Réf. puzzle (collection `puzzles`).
        status (PuzzleStatus): Statut courant.
        progress_percentage (int): Avancement 0–100.
        difficulty_rating (int | None): Difficulté ressentie 1–5.
        user_rating (int | None): Note de qualité 1–5.
        time_spent_seconds (int | None): Temps passé.
        notes (str | None): Notes libres.
        photos (list[str]): URLs des photos (ordre conservé).
        private (bool): Log masqué des autres utilisateurs.
        started_at, completed_at (datetime | None): Premier démarrage, achèvement.
        created_at, updated_at (datetime): Horodatages.
    """

    user_id: str
    puzzle_id: str
    status: PuzzleStatus = PuzzleStatus.WISHLIST
    progress_percentage: int = Field(default=PROGRESS_MIN, ge=PROGRESS_MIN, le=PROGRESS_MAX)
    difficulty_rating: Optional[int] = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    user_rating: Optional[int] = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    time_spent_seconds: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    photos: list[str] = Field(default_factory=list)
    private: bool = False

    started_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "PuzzleLog":
        """Construire un log depuis un document stocké (statut validé ou dérivé)."""
        data = dict(doc)
        data["status"] = derive_legacy_status(doc)
        return cls.model_validate(data)


class UserPuzzle(PuzzleLog):
    """Log enrichi des métadonnées du puzzle (lecture seule, pour les stats et listes)."""

    title: Optional[str] = None
    brand: str = "Unknown"
    pieces: Optional[int] = None
