"""MongoDB client construction and index management."""

from __future__ import annotations

import logging

from pymongo import MongoClient
from pymongo.database import Database

from articlearc.config import Settings
from articlearc.stores.articles import ArticleStore
from articlearc.stores.interactions import InteractionStore
from articlearc.stores.users import UserStore

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> MongoClient:
    # The driver connects lazily; construction never blocks on the server.
    return MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
    )


def get_database(client: MongoClient, settings: Settings) -> Database:
    return client[settings.mongodb_database]


async def ensure_indexes(database: Database) -> None:
    """Create every index the stores rely on, including the uniqueness backstops."""
    users = UserStore(database)
    articles = ArticleStore(database)
    interactions = InteractionStore(database, articles)
    await users.ensure_indexes()
    await articles.ensure_indexes()
    await interactions.ensure_indexes()
    logger.info(f"Indexes ensured on database '{database.name}'")
