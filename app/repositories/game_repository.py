"""
🏈 GameRepository - acceso a partidos y equipos

El alta/edición de partidos la hace un proceso administrativo externo;
aquí solo leemos (y el feed de resultados escribe los scores finales).
"""

from datetime import datetime
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.game import Game
from app.models.team import Team


class GameRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["games"]
        self.teams = db["teams"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, game: Game) -> Game:
        """Crea un partido (lo usan los scripts de carga y los tests)"""
        try:
            await self.collection.insert_one(game.model_dump(by_alias=True))
            return game
        except DuplicateKeyError:
            raise ValueError(f"Game with id {game.id} already exists")

    async def create_team(self, team: Team) -> Team:
        try:
            await self.teams.insert_one(team.model_dump(by_alias=True))
            return team
        except DuplicateKeyError:
            raise ValueError(f"Team with id {team.id} already exists")

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, game_id: int) -> Optional[Game]:
        """Obtiene un partido por ID"""
        doc = await self.collection.find_one({"id": game_id})
        return Game(**doc) if doc else None

    async def get_many(self, game_ids: Iterable[int]) -> dict[int, Game]:
        """Partidos por ID, en un dict para lookups rápidos"""
        ids = list(set(game_ids))
        if not ids:
            return {}
        cursor = self.collection.find({"id": {"$in": ids}})
        docs = await cursor.to_list(length=None)
        return {doc["id"]: Game(**doc) for doc in docs}

    async def get_starting_between(
        self,
        start: datetime,
        end: datetime
    ) -> list[Game]:
        """Partidos que empiezan en [start, end), ordenados por hora"""
        cursor = self.collection.find({
            "start_time": {"$gte": start, "$lt": end}
        }).sort("start_time", 1)
        docs = await cursor.to_list(length=None)
        return [Game(**doc) for doc in docs]

    async def get_teams(self, team_ids: Iterable[int]) -> dict[int, Team]:
        ids = list(set(team_ids))
        if not ids:
            return {}
        cursor = self.teams.find({"id": {"$in": ids}})
        docs = await cursor.to_list(length=None)
        return {doc["id"]: Team(**doc) for doc in docs}

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def record_final_score(
        self,
        game_id: int,
        home_score: int,
        away_score: int
    ) -> Optional[Game]:
        """
        Escribe el resultado final (feed de resultados)

        Ambos scores y el flag ended van en la misma escritura, nunca
        queda un partido a medio liquidar.
        """
        result = await self.collection.find_one_and_update(
            {"id": game_id},
            {
                "$set": {
                    "home_score": home_score,
                    "away_score": away_score,
                    "ended": True,
                }
            },
            return_document=ReturnDocument.AFTER
        )
        return Game(**result) if result else None
