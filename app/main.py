"""
Entry point de la API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.database import Database, create_indexes
from app.services.change_notifier import notifier
from app.services.leaderboard_service import leaderboard_cache, register_cache_invalidation
from app.services.scoring_service import register_settlement_reactor

from app.controllers.picks_controller import router as picks_router
from app.controllers.leaderboard_controller import router as leaderboard_router
from app.controllers.games_controller import router as games_router
from app.controllers.changes_controller import router as changes_router
from app.controllers.health_controller import router as health_router

settings = get_settings()
setup_logging(settings)

logger = logging.getLogger(__name__)


def wire_reactors():
    """Conecta los consumidores de notificaciones del proceso"""
    notifier.clear_handlers()
    register_cache_invalidation(notifier, leaderboard_cache)
    register_settlement_reactor(notifier, Database.get_db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    await create_indexes(Database.get_db())
    wire_reactors()
    logger.info("Spread Picks API started (%s)", settings.app_env)
    yield
    notifier.clear_handlers()
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Spread Picks API",
    description="Picks against the spread, settlement and leaderboard",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(picks_router)
app.include_router(leaderboard_router)
app.include_router(games_router)
app.include_router(changes_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Spread Picks API",
        "version": "1.0.0",
        "docs": "/docs"
    }
