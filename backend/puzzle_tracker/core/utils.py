# backend/puzzle_tracker/core/utils.py
# Fonctions temporelles (UTC aware, fuseau local des stats) et arrondi « à la JS ».

import datetime as dt
import math
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow():
    """Date/heure UTC (timezone-aware).

    Description:
        Retourne `datetime.now(timezone.utc)`. Tous les horodatages persistés
        (created_at, updated_at, started_at, completed_at) passent par ici.

    Returns:
        datetime.datetime: Timestamp UTC (aware).
    """
    return dt.datetime.now(dt.timezone.utc)


def ensure_aware(value: dt.datetime) -> dt.datetime:
    """Attache UTC à un datetime naive (documents Mongo lus sans tz_aware)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def now_in(tz_name: str) -> dt.datetime:
    """Date/heure courante dans le fuseau `tz_name`.

    Description:
        Sert de « maintenant » pour les statistiques (début de mois, semaines).
        Un nom de fuseau inconnu retombe sur UTC.

    Args:
        tz_name (str): Nom IANA (ex. "Europe/Paris").

    Returns:
        datetime.datetime: Timestamp aware dans le fuseau demandé.
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = dt.timezone.utc
    return dt.datetime.now(tz)


def round_half_up(value: float) -> int:
    """Arrondi au plus proche, .5 vers le haut (Python arrondit au pair)."""
    return int(math.floor(value + 0.5))
