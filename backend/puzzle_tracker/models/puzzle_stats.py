# backend/puzzle_tracker/models/puzzle_stats.py
# Statistiques agrégées d'un utilisateur (dérivées, jamais persistées).

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class BestTime(BaseModel):
    """Meilleur temps pour une tranche de nombre de pièces."""

    bracket: int = Field(description="Nombre de pièces de la tranche (±50)")
    seconds: Optional[int] = Field(None, description="Meilleur temps, null si aucun log")
    display: Optional[str] = Field(None, description="Meilleur temps formaté (ex. 2h 30m)")


class AggregateStats(BaseModel):
    """Statistiques synthétiques des puzzles d'un utilisateur.

    Attributes:
        total_completed (int): Logs au statut `completed`.
        total_time_spent (int): Somme des temps (s) des logs terminés.
        average_time_per_puzzle (int): Moyenne arrondie (s), 0 sans log terminé.
        this_month_completed (int): Terminés depuis le 1er du mois courant.
        favorite_brand (str): Marque la plus fréquente parmi les terminés.
        weekly_streak (int): Semaines consécutives avec au moins un puzzle terminé.
        best_times (list[BestTime]): Meilleurs temps par tranche.
        total_puzzles (int): Nombre total de logs.
        total_owned (int): Logs en library, in-progress ou completed.
        status_counts (dict[str, int]): Nombre de logs par statut.
    """

    total_completed: int = Field(0, ge=0)
    total_time_spent: int = Field(0, ge=0)
    average_time_per_puzzle: int = Field(0, ge=0)
    this_month_completed: int = Field(0, ge=0)
    favorite_brand: str = "Unknown"
    weekly_streak: int = Field(0, ge=0)
    best_times: list[BestTime] = Field(default_factory=list)
    total_puzzles: int = Field(0, ge=0)
    total_owned: int = Field(0, ge=0)
    status_counts: dict[str, int] = Field(default_factory=dict)

    def best_time_for(self, bracket: int) -> Optional[int]:
        """Meilleur temps (s) de la tranche `bracket`, None si absent."""
        for best in self.best_times:
            if best.bracket == bracket:
                return best.seconds
        return None
