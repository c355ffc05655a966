# backend/puzzle_tracker/core/errors.py
# Exceptions métier du suivi de puzzles (converties en réponses HTTP par les handlers).

from __future__ import annotations


class PuzzleTrackerError(Exception):
    """Base des erreurs métier.

    Attributes:
        code (str): Code stable exposé dans l'enveloppe d'erreur.
        status_code (int): Statut HTTP associé.
    """

    code = "PUZZLE_TRACKER_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PuzzleTrackerError):
    """Statut hors vocabulaire, progression hors [0,100], valeur incohérente."""

    code = "VALIDATION_ERROR"
    status_code = 422


class PuzzleLogNotFoundError(PuzzleTrackerError):
    code = "PUZZLE_LOG_NOT_FOUND"
    status_code = 404


class PuzzleLogExistsError(PuzzleTrackerError):
    """Un log existe déjà pour ce couple (utilisateur, puzzle)."""

    code = "PUZZLE_LOG_EXISTS"
    status_code = 409
