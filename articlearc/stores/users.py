"""User accounts collection."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from articlearc.errors import DuplicateUser
from articlearc.models import User, utc_now
from articlearc.stores.base import is_object_id, parse_object_id, run_sync

logger = logging.getLogger(__name__)


def _to_user(document: Dict[str, Any]) -> User:
    return User(
        id=str(document["_id"]),
        username=document["username"],
        email=document["email"],
        interests=list(document.get("interests", [])),
        created_at=document["createdAt"],
        updated_at=document["updatedAt"],
    )


class UserStore:
    def __init__(self, database: Database) -> None:
        self._collection = database["users"]

    async def ensure_indexes(self) -> None:
        await run_sync(
            self._collection.create_index, [("username", ASCENDING)], unique=True
        )
        await run_sync(
            self._collection.create_index, [("email", ASCENDING)], unique=True
        )

    async def _conflicting_field(self, username: str, email: str) -> Optional[str]:
        existing = await run_sync(
            self._collection.find_one,
            {"$or": [{"username": username}, {"email": email}]},
            {"username": 1},
        )
        if existing is None:
            return None
        return "username" if existing["username"] == username else "email"

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        interests: List[str],
    ) -> User:
        """Insert a new account. Raises DuplicateUser on a taken username or email."""
        field = await self._conflicting_field(username, email)
        if field is not None:
            raise DuplicateUser(field)

        now = utc_now()
        document = {
            "username": username,
            "email": email,
            "password": password_hash,
            "interests": interests,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            await run_sync(self._collection.insert_one, document)
        except DuplicateKeyError as exc:
            field = await self._conflicting_field(username, email)
            raise DuplicateUser(field or "username") from exc

        logger.info(f"Created user {username}")
        return _to_user(document)

    async def get(self, user_id: str) -> Optional[User]:
        if not is_object_id(user_id):
            return None
        document = await run_sync(
            self._collection.find_one,
            {"_id": parse_object_id(user_id)},
            {"password": 0},
        )
        return _to_user(document) if document else None

    async def get_credentials(self, login: str) -> Optional[Tuple[User, str]]:
        """Look an account up by username or email, returning it with its password hash."""
        document = await run_sync(
            self._collection.find_one,
            {"$or": [{"username": login}, {"email": login.lower()}]},
        )
        if document is None:
            return None
        return _to_user(document), document["password"]
