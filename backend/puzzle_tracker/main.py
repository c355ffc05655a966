# backend/puzzle_tracker/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI

from puzzle_tracker.api.routes import routers
from puzzle_tracker.core.exception_handlers import register_exception_handlers
from puzzle_tracker.core.logging_config import get_loggers
from puzzle_tracker.core.settings import get_settings
from puzzle_tracker.db.seed_indexes import ensure_indexes

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- startup ---
    logger, error_logger, _ = get_loggers()
    if settings.ensure_indexes_on_startup:
        try:
            await ensure_indexes()
            logger.info("MongoDB indexes ensured")
        except Exception as e:
            # L'API démarre quand même ; /health signalera la base injoignable
            error_logger.error(f"Index creation failed: {e}")

    yield  # l'app tourne ici

    # --- shutdown ---
    # rien pour le moment


app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)
register_exception_handlers(app)

for r in routers:
    app.include_router(r)
