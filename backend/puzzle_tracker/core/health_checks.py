from puzzle_tracker.core.logging_config import get_loggers


async def check_mongodb() -> str:
    """
    Vérifie la connexion MongoDB

    Returns:
        "ok" si connecté, message d'erreur sinon
    """
    try:
        from puzzle_tracker.db.mongodb import db

        await db.command("ping")
        return "ok"

    except Exception as e:
        get_loggers()[1].error(f"MongoDB health check failed: {e}")
        return f"error: {str(e)}"
