# backend/puzzle_tracker/db/mongodb.py
# Initialise le client MongoDB à partir des settings et expose un accès simple aux collections.

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from puzzle_tracker.core.settings import get_settings

settings = get_settings()

# La connexion est établie paresseusement, à la première opération
client: AsyncIOMotorClient = AsyncIOMotorClient(settings.mongodb_uri, tz_aware=True)
db: AsyncIOMotorDatabase = client[settings.mongodb_db]


def get_db() -> AsyncIOMotorDatabase:
    """Base MongoDB de l'application (dépendance FastAPI)."""
    return db


async def get_collection(name: str) -> AsyncIOMotorCollection:
    """Retourne une collection MongoDB par son nom.

    Args:
        name (str): Nom de la collection (ex. "puzzle_logs", "feed_items").

    Returns:
        AsyncIOMotorCollection: Instance de collection MongoDB asynchrone.
    """
    return db[name]
