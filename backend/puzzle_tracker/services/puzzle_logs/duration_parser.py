# backend/puzzle_tracker/services/puzzle_logs/duration_parser.py
# Conversion d'une durée saisie librement (« 2h 30m », « 90m », « 1.5h », « 45 ») en secondes, et affichage inverse.

from __future__ import annotations

import math
import re

from puzzle_tracker.core.utils import round_half_up
from puzzle_tracker.shared.constants import SECONDS_PER_HOUR, SECONDS_PER_MINUTE

_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*h", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+)\s*m", re.IGNORECASE)


def parse_duration(text: str | None) -> int:
    """Convertir une durée libre en secondes.

    Description:
        Parseur tolérant, utilisé à l'identique par l'action rapide « terminé » et par
        le formulaire d'édition d'un log :
        - composante heures `<nombre>h` (décimal autorisé) et/ou minutes `<entier>m`;
        - sans composante reconnue, l'entrée entière est un nombre de **minutes**;
        - entrée vide ou illisible → 0, jamais d'exception.

    Args:
        text (str | None): Saisie utilisateur.

    Returns:
        int: Durée en secondes (arrondie à la seconde la plus proche).
    """
    if text is None:
        return 0
    stripped = text.strip()
    if not stripped:
        return 0

    hour_match = _HOURS_RE.search(stripped)
    minute_match = _MINUTES_RE.search(stripped)

    total_minutes = 0.0
    if hour_match:
        total_minutes += float(hour_match.group(1)) * 60
    if minute_match:
        total_minutes += int(minute_match.group(1))

    if not hour_match and not minute_match:
        try:
            number = float(stripped)
        except ValueError:
            return 0
        # "inf", "nan" et les négatifs ne sont pas des durées
        if not math.isfinite(number) or number < 0:
            return 0
        total_minutes = number

    return round_half_up(total_minutes * SECONDS_PER_MINUTE)


def format_duration(seconds: int | None) -> str:
    """Afficher une durée en secondes : « 0m », « 45m », « 2h », « 2h 30m »."""
    if not seconds or seconds < 0:
        return "0m"
    hours = seconds // SECONDS_PER_HOUR
    minutes = (seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"
