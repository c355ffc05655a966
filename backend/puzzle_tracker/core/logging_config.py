"""Configuration du système de logging centralisé."""

import datetime as dt
import json
import logging
import logging.handlers
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from bson import ObjectId
from rich.logging import RichHandler

from puzzle_tracker.core.settings import get_settings

_DATE_IN_NAME = re.compile(r"(\d{4}-\d{2}-\d{2})")


class CustomJSONEncoder(json.JSONEncoder):
    """Encodeur JSON pour ObjectId, datetime et enums (statuts, types de feed)."""

    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        elif isinstance(obj, dt.datetime):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class DataLogger:
    """Logger des données structurées (transitions, événements de feed) en JSON."""

    def __init__(self, logs_dir: str = "logs"):
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_data(
        self,
        calling_context: str,
        data: Dict[str, Any],
        user_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Ajoute une entrée au fichier JSON du jour (tableau JSON valide)."""
        today = dt.datetime.now().strftime("%Y-%m-%d")
        json_file = self.logs_dir / f"{today}-data.json"

        entry = {
            "datetime": dt.datetime.now().isoformat(),
            "calling_context": calling_context,
            "user_data": user_data or {},
            "data": data,
        }
        serialized = json.dumps(entry, cls=CustomJSONEncoder)

        if json_file.exists():
            content = json_file.read_text(encoding="utf-8").rstrip()
            # On retire le crochet fermant pour ajouter l'entrée
            if content.endswith("]"):
                content = content[:-1].rstrip()
            if content.endswith("}"):
                content += ","
            elif not content:
                content = "["
            json_file.write_text(f"{content}{serialized}]", encoding="utf-8")
        else:
            json_file.write_text(f"[{serialized}]", encoding="utf-8")


def _rotating_handler(path: Path, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=path,
        when="midnight",
        interval=1,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Configure le système de logging avec rotation quotidienne.

    Returns:
        tuple: (logger_generic, logger_errors, data_logger)
    """
    settings = get_settings()
    logs_dir = Path(settings.logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    cleanup_old_logs(logs_dir, retention_days=settings.log_retention_days)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Logger générique (INFO+)
    generic_logger = logging.getLogger("puzzle_tracker.generic")
    generic_logger.setLevel(logging.INFO)

    if not generic_logger.handlers:  # Éviter les doublons
        generic_logger.addHandler(_rotating_handler(logs_dir / "generic.log", formatter))
        if settings.environment == "development":
            generic_logger.addHandler(RichHandler(rich_tracebacks=True, show_path=False))

    # Logger erreurs (ERROR+)
    error_logger = logging.getLogger("puzzle_tracker.errors")
    error_logger.setLevel(logging.ERROR)

    if not error_logger.handlers:
        error_logger.addHandler(_rotating_handler(logs_dir / "errors.log", formatter))

    data_logger = DataLogger(str(logs_dir))

    return generic_logger, error_logger, data_logger


def cleanup_old_logs(logs_dir: Path, retention_days: int = 30) -> None:
    """Supprime les fichiers de logs datés de plus de `retention_days` jours."""
    cutoff_str = (dt.datetime.now() - dt.timedelta(days=retention_days)).strftime("%Y-%m-%d")

    for file_path in logs_dir.iterdir():
        if not file_path.is_file():
            continue
        match = _DATE_IN_NAME.search(file_path.name)
        if match and match.group(1) < cutoff_str:
            try:
                file_path.unlink()
            except OSError:
                continue


# Instance globale (lazy initialization)
_loggers: Optional[tuple[logging.Logger, logging.Logger, DataLogger]] = None


def get_loggers() -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Retourne les loggers configurés (singleton)."""
    global _loggers
    if _loggers is None:
        _loggers = setup_logging()
    return _loggers

