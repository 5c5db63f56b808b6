"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/picks/me")
        async def get_my_picks(db: AsyncIOMotorDatabase = Depends(get_database)):
            ...
    """
    return Database.get_db()


# ============================================
# 🏗️ ÍNDICES (idempotente, se corre en el startup)
# ============================================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Crea los índices necesarios

    El _id de picks ya es user_id:game_id; el índice compuesto único es
    la misma garantía expresada sobre los campos.
    """
    # Partidos y equipos
    await db.games.create_index("id", unique=True)
    await db.games.create_index("start_time")
    await db.teams.create_index("id", unique=True)

    # Picks
    await db.picks.create_index([("user_id", 1), ("game_id", 1)], unique=True)
    await db.picks.create_index("game_id")
    await db.picks.create_index([("user_id", 1), ("created_at", -1)])

    # Users
    await db.users.create_index("email")

    logger.info("Indexes created")
