# backend/puzzle_tracker/services/puzzle_stats.py
# Service pour calculer les statistiques synthétiques des puzzles d'un utilisateur

from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Iterable, Optional

from puzzle_tracker.core.utils import ensure_aware, now_in, round_half_up
from puzzle_tracker.models.puzzle_log import UserPuzzle
from puzzle_tracker.models.puzzle_stats import AggregateStats, BestTime
from puzzle_tracker.models.status import OWNED_STATUSES, PuzzleStatus
from puzzle_tracker.services.puzzle_logs.duration_parser import format_duration
from puzzle_tracker.services.puzzle_logs.puzzle_log_store import PuzzleLogStore
from puzzle_tracker.shared.constants import PIECE_BRACKET_TOLERANCE, PIECE_BRACKETS


def compute_aggregate_stats(
    puzzles: Iterable[UserPuzzle],
    now: dt.datetime,
    brackets: Iterable[int] = PIECE_BRACKETS,
) -> AggregateStats:
    """Réduire les logs d'un utilisateur en statistiques synthétiques.

    Description:
        Fonction pure : aucune lecture ni écriture, recalculable à volonté.
        `now` fixe le fuseau de référence (début de mois, semaines).

    Args:
        puzzles (Iterable[UserPuzzle]): Tous les logs de l'utilisateur, avec marque et pièces.
        now (datetime): Instant courant, aware, dans le fuseau de l'appelant.
        brackets (Iterable[int]): Tranches de pièces pour les meilleurs temps.

    Returns:
        AggregateStats: Statistiques calculées.
    """
    now = ensure_aware(now)
    puzzles = list(puzzles)
    completed = [p for p in puzzles if p.status is PuzzleStatus.COMPLETED]

    total_time_spent = sum(p.time_spent_seconds or 0 for p in completed)
    average = round_half_up(total_time_spent / len(completed)) if completed else 0

    status_counts = Counter(p.status.value for p in puzzles)

    return AggregateStats(
        total_completed=len(completed),
        total_time_spent=total_time_spent,
        average_time_per_puzzle=average,
        this_month_completed=count_this_month(completed, now),
        favorite_brand=favorite_brand(completed),
        weekly_streak=weekly_streak(completed, now),
        best_times=best_times(completed, brackets),
        total_puzzles=len(puzzles),
        total_owned=sum(1 for p in puzzles if p.status in OWNED_STATUSES),
        status_counts={s.value: status_counts.get(s.value, 0) for s in PuzzleStatus},
    )


def count_this_month(completed: list[UserPuzzle], now: dt.datetime) -> int:
    """Nombre de puzzles terminés depuis le 1er du mois courant (fuseau de `now`)."""
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return sum(
        1
        for p in completed
        if p.completed_at is not None and ensure_aware(p.completed_at) >= month_start
    )


def favorite_brand(completed: list[UserPuzzle]) -> str:
    """Marque la plus fréquente parmi les terminés (égalité : première rencontrée)."""
    counts = Counter(p.brand or "Unknown" for p in completed)
    if not counts:
        return "Unknown"
    # most_common est stable : à égalité, l'ordre d'insertion est conservé
    return counts.most_common(1)[0][0]


def _week_start(day: dt.date) -> dt.date:
    # Semaine commençant le dimanche
    return day - dt.timedelta(days=(day.weekday() + 1) % 7)


def weekly_streak(completed: list[UserPuzzle], now: dt.datetime) -> int:
    """Semaines consécutives avec au moins un puzzle terminé.

    Description:
        Heuristique volontairement approximative : les semaines (début dimanche)
        contenant un achèvement sont parcourues de la plus récente à la plus
        ancienne. La plus récente doit se terminer au plus une semaine avant
        aujourd'hui ; chaque suivante doit précéder la précédente d'exactement une
        semaine. Le premier trou arrête le décompte.
    """
    tz = now.tzinfo
    weeks = sorted(
        {
            _week_start(ensure_aware(p.completed_at).astimezone(tz).date())
            for p in completed
            if p.completed_at is not None
        },
        reverse=True,
    )
    if not weeks:
        return 0

    today = now.date()
    most_recent_end = weeks[0] + dt.timedelta(days=6)
    if (today - most_recent_end).days // 7 > 1:
        return 0

    streak = 1
    for previous, current in zip(weeks, weeks[1:]):
        if (previous - current).days // 7 != 1:
            break
        streak += 1
    return streak


def best_times(
    completed: list[UserPuzzle], brackets: Iterable[int] = PIECE_BRACKETS
) -> list[BestTime]:
    """Meilleur temps (> 0) par tranche de pièces, tolérance ±50 pièces."""
    results = []
    for bracket in brackets:
        times = [
            p.time_spent_seconds
            for p in completed
            if p.time_spent_seconds
            and p.time_spent_seconds > 0
            and p.pieces is not None
            and abs(p.pieces - bracket) <= PIECE_BRACKET_TOLERANCE
        ]
        best: Optional[int] = min(times) if times else None
        results.append(
            BestTime(
                bracket=bracket,
                seconds=best,
                display=format_duration(best) if best is not None else None,
            )
        )
    return results


async def get_puzzle_stats(
    store: PuzzleLogStore, user_id: str, tz_name: str = "UTC"
) -> AggregateStats:
    """Charger les logs d'un utilisateur et calculer ses statistiques.

    Args:
        store (PuzzleLogStore): Accès persistance.
        user_id (str): Identifiant de l'utilisateur.
        tz_name (str): Fuseau de référence (début de mois, semaines).

    Returns:
        AggregateStats: Statistiques calculées.
    """
    puzzles = await store.list_user_puzzles(user_id)
    return compute_aggregate_stats(puzzles, now_in(tz_name))
