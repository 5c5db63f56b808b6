"""
🎯 PickRepository - acceso a la colección de picks

El _id del documento es la clave compuesta user_id:game_id, así que el
índice único de _id es lo que garantiza un solo pick activo por usuario
y partido. Todas las escrituras que dependen del estado actual son
compare-and-swap sobre un solo documento: o se aplican completas o no
se aplican.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.locks import pick_key
from app.models.fields import format_decimal
from app.models.pick import Pick


class DuplicateActivePickError(Exception):
    """Ya existe un pick para ese user_id:game_id"""
    pass


class PickRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["picks"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def insert(self, pick: Pick) -> Pick:
        """
        Inserta un pick nuevo

        Si otro proceso ya insertó uno para la misma clave, lanza
        DuplicateActivePickError (nunca quedan dos picks activos)
        """
        try:
            await self.collection.insert_one(pick.model_dump(by_alias=True))
        except DuplicateKeyError as e:
            raise DuplicateActivePickError(f"Pick {pick.key} already exists") from e
        return pick

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_key(self, key: str) -> Optional[Pick]:
        doc = await self.collection.find_one({"_id": key})
        return Pick(**doc) if doc else None

    async def get(self, user_id: str, game_id: int) -> Optional[Pick]:
        """Pick de un usuario para un partido"""
        return await self.get_by_key(pick_key(user_id, game_id))

    async def list_for_game(self, game_id: int) -> list[Pick]:
        """Todos los picks de un partido (para liquidar)"""
        cursor = self.collection.find({"game_id": game_id}).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def list_for_user(self, user_id: str) -> list[Pick]:
        """Todos los picks de un usuario, los más nuevos primero"""
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", -1)
        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def get_for_games(self, user_id: str, game_ids: Iterable[int]) -> dict[int, Pick]:
        """Picks de un usuario para varios partidos, por game_id (una sola consulta)"""
        ids = list(set(game_ids))
        if not ids:
            return {}
        cursor = self.collection.find({"user_id": user_id, "game_id": {"$in": ids}})
        docs = await cursor.to_list(length=None)
        return {doc["game_id"]: Pick(**doc) for doc in docs}

    async def list_all(self) -> list[Pick]:
        """Todos los picks, para recalcular el leaderboard desde cero"""
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def distinct_user_ids(self) -> list[str]:
        """Usuarios con al menos un pick"""
        return await self.collection.distinct("user_id")

    # ============================================
    # 📌 UPDATE (compare-and-swap)
    # ============================================

    async def replace_team(
        self,
        key: str,
        expected_team_id: int,
        new_pick: Pick
    ) -> Optional[Pick]:
        """
        Cambia el equipo elegido en una sola escritura

        Solo aplica si el pick sigue teniendo expected_team_id y no tiene
        score. Retorna None si alguien lo cambió en el medio.
        """
        result = await self.collection.find_one_and_update(
            {"_id": key, "team_id": expected_team_id, "score": None},
            {
                "$set": {
                    "id": new_pick.id,
                    "team_id": new_pick.team_id,
                    "created_at": new_pick.created_at,
                }
            },
            return_document=ReturnDocument.AFTER
        )
        return Pick(**result) if result else None

    async def set_score_once(
        self,
        key: str,
        expected_team_id: int,
        score: Decimal
    ) -> bool:
        """
        Guarda el score de un pick si todavía no tenía

        Solo aplica si el pick sigue apuntando a expected_team_id (el equipo
        con el que se calculó el score). Retorna False si ya estaba
        liquidado, si cambió de equipo o si ya no existe.
        """
        result = await self.collection.update_one(
            {"_id": key, "team_id": expected_team_id, "score": None},
            {"$set": {"score": format_decimal(score)}}
        )
        return result.modified_count > 0

    # ============================================
    # 📌 DELETE
    # ============================================

    async def delete_if(self, key: str, expected_team_id: int) -> bool:
        """Borra el pick solo si sigue apuntando a expected_team_id"""
        result = await self.collection.delete_one(
            {"_id": key, "team_id": expected_team_id, "score": None}
        )
        return result.deleted_count > 0


def truncate_to_millis(now: datetime) -> datetime:
    # Mongo guarda milisegundos; truncamos acá para que lo leído sea igual a lo escrito
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)
