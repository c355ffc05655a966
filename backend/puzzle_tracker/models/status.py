# backend/puzzle_tracker/models/status.py
# Vocabulaire fermé des statuts d'un puzzle log et des types d'items de feed.

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from puzzle_tracker.core.errors import ValidationError


class PuzzleStatus(str, Enum):
    """Statuts possibles de la relation utilisateur ↔ puzzle.

    Description:
        Toute branche (validation, classification du feed, stats) qui dépend du statut
        doit couvrir ces cinq valeurs. Une valeur brute lue en base passe par
        `parse_status` avant usage.
    """

    WISHLIST = "wishlist"
    LIBRARY = "library"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def label(self) -> str:
        """Libellé lisible (« in progress »)."""
        return self.value.replace("-", " ").replace("_", " ")


# Statuts comptés comme « possédés » dans les stats
OWNED_STATUSES = frozenset(
    {PuzzleStatus.LIBRARY, PuzzleStatus.IN_PROGRESS, PuzzleStatus.COMPLETED}
)


class FeedItemType(str, Enum):
    PUZZLE_LOG = "puzzle_log"
    SOLVED = "solved"
    ADD_TO_LIST = "add_to_list"
    STATUS_CHANGE = "status_change"
    REVIEW = "review"
    PUZZLE_UPLOAD = "puzzle_upload"


def parse_status(value: Any) -> PuzzleStatus:
    """Valider une valeur de statut.

    Args:
        value (Any): Statut brut (chaîne ou `PuzzleStatus`).

    Returns:
        PuzzleStatus: Statut validé.

    Raises:
        ValidationError: Si la valeur n'appartient pas au vocabulaire.
    """
    if isinstance(value, PuzzleStatus):
        return value
    try:
        return PuzzleStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in PuzzleStatus)
        raise ValidationError(f"Invalid status: {value!r}. Must be one of: {allowed}") from None


def derive_legacy_status(doc: Mapping[str, Any]) -> PuzzleStatus:
    """Statut d'un document stocké, dérivé des champs si `status` est absent.

    Description:
        Les anciens documents n'ont pas de champ `status` : terminé si `completed_at`
        est renseigné, en cours si démarré ou progression > 0, sinon bibliothèque.

    Args:
        doc (Mapping): Document `puzzle_logs` brut.

    Returns:
        PuzzleStatus: Statut validé ou dérivé.

    Raises:
        ValidationError: Si `status` est présent mais hors vocabulaire.
    """
    raw = doc.get("status")
    if raw:
        return parse_status(raw)
    if doc.get("completed_at"):
        return PuzzleStatus.COMPLETED
    if doc.get("started_at") or (doc.get("progress_percentage") or 0) > 0:
        return PuzzleStatus.IN_PROGRESS
    return PuzzleStatus.LIBRARY
