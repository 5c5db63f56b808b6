"""
UserRepository - MongoDB access for users collection.

Users are owned by the auth provider; we only read them to authorize
requests and to show display names.
"""

from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.user import User, display_name_for


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        doc = await self.collection.find_one({"_id": user_id})
        return User(**doc) if doc else None

    async def get_display_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        """Display name per user ID; unknown users are left out."""
        ids = list(set(user_ids))
        if not ids:
            return {}

        cursor = self.collection.find(
            {"_id": {"$in": ids}},
            {"email": 1, "name": 1}
        )
        docs = await cursor.to_list(length=None)
        return {
            doc["_id"]: display_name_for(doc.get("name"), doc.get("email"))
            for doc in docs
        }
