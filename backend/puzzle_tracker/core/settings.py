# backend/puzzle_tracker/core/settings.py
# Paramètres de l'application (variables d'environnement / .env) via pydantic-settings.

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === App settings ===
    app_name: str = "PuzzleTracker"
    environment: str = "development"  # or "production"
    api_version: str = "0.1.0"

    # === MongoDB ===
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "puzzle_tracker"
    ensure_indexes_on_startup: bool = True

    # === LOGS ===
    logs_dir: str = "logs"
    log_retention_days: int = 30

    # === STATUTS / FEED ===
    # abandoned -> in-progress remet started_at à maintenant
    restart_resets_started_at: bool = False
    # wishlist <-> library ne produit aucun item de feed
    suppress_minor_transitions: bool = True
    feed_enabled: bool = True

    # === STATS ===
    stats_timezone: str = "UTC"

    # === PAGINATION ===
    default_page_size: int = 50
    max_page_size: int = 200

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Instance unique des settings (chargée au premier appel)."""
    return Settings()
