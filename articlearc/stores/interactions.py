"""
Interaction events collection.

One document per (userId, articleId, interactionType). The application checks
for an existing record before inserting, but two concurrent requests can both
pass that check; the unique compound index is what actually enforces the
invariant, and an index violation is answered exactly like a found record.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from articlearc.errors import ArticleNotFound, InvalidInteractionKind
from articlearc.models import (
    Interaction,
    InteractionFilters,
    InteractionKind,
    utc_now,
)
from articlearc.stores.articles import ArticleStore
from articlearc.stores.base import parse_object_id, run_sync

logger = logging.getLogger(__name__)

UNIQUE_INDEX_NAME = "user_article_kind_unique"


def coerce_kind(kind: Union[InteractionKind, str]) -> InteractionKind:
    if isinstance(kind, InteractionKind):
        return kind
    try:
        return InteractionKind(kind)
    except ValueError as exc:
        raise InvalidInteractionKind() from exc


def build_interaction_filter(
    user_id: str, filters: Optional[InteractionFilters] = None
) -> Dict[str, Any]:
    """
    Translate optional filters into a query document.

    The owner predicate is always present; absent filter fields add no predicate.
    """
    query: Dict[str, Any] = {"userId": parse_object_id(user_id)}
    if filters is None:
        return query
    if filters.kind is not None:
        query["interactionType"] = coerce_kind(filters.kind).value
    if filters.article_id is not None:
        query["articleId"] = parse_object_id(
            filters.article_id, message="Invalid article ID format"
        )
    return query


def _to_interaction(document: Dict[str, Any]) -> Interaction:
    user_id = document.get("userId")
    return Interaction(
        id=str(document["_id"]),
        article_id=str(document["articleId"]),
        kind=InteractionKind(document["interactionType"]),
        created_at=document["createdAt"],
        updated_at=document["updatedAt"],
        user_id=str(user_id) if user_id is not None else None,
    )


class InteractionStore:
    def __init__(self, database: Database, articles: ArticleStore) -> None:
        self._collection = database["interactions"]
        self._articles = articles

    async def ensure_indexes(self) -> None:
        await run_sync(
            self._collection.create_index,
            [
                ("userId", ASCENDING),
                ("articleId", ASCENDING),
                ("interactionType", ASCENDING),
            ],
            unique=True,
            name=UNIQUE_INDEX_NAME,
        )
        await run_sync(self._collection.create_index, [("articleId", ASCENDING)])
        await run_sync(self._collection.create_index, [("userId", ASCENDING)])
        await run_sync(self._collection.create_index, [("createdAt", DESCENDING)])

    async def _find_one(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await run_sync(self._collection.find_one, key)

    async def _with_article(self, interaction: Interaction) -> Interaction:
        views = await self._articles.get_views([interaction.article_id])
        interaction.article = views.get(interaction.article_id)
        return interaction

    async def record_interaction(
        self,
        user_id: str,
        article_id: str,
        kind: Union[InteractionKind, str],
    ) -> Tuple[Interaction, bool]:
        """
        Create the (user, article, kind) record, or fetch it if it already exists.

        Returns the record and whether this call created it.
        """
        kind = coerce_kind(kind)
        article_oid = parse_object_id(article_id, message="Invalid article ID format")
        if not await self._articles.exists(article_oid):
            raise ArticleNotFound()

        key = {
            "userId": parse_object_id(user_id),
            "articleId": article_oid,
            "interactionType": kind.value,
        }
        existing = await self._find_one(key)
        if existing is not None:
            return await self._with_article(_to_interaction(existing)), False

        now = utc_now()
        document = dict(key, createdAt=now, updatedAt=now)
        try:
            await run_sync(self._collection.insert_one, document)
        except DuplicateKeyError:
            # Lost the race against a concurrent identical submission.
            existing = await self._find_one(key)
            if existing is None:
                raise
            logger.info(
                f"Duplicate {kind.value} interaction on {article_id} resolved to "
                f"existing record {existing['_id']}"
            )
            return await self._with_article(_to_interaction(existing)), False

        logger.debug(f"Recorded {kind.value} interaction {document['_id']}")
        return await self._with_article(_to_interaction(document)), True

    async def query_interactions(
        self,
        user_id: str,
        filters: Optional[InteractionFilters],
        skip: int,
        limit: int,
    ) -> Tuple[List[Interaction], int]:
        """
        Page through one user's interactions, newest first.

        The owner reference is projected out of the returned records, which
        instead carry the display fields of the referenced article.
        """
        query = build_interaction_filter(user_id, filters)

        def _page() -> List[Dict[str, Any]]:
            cursor = (
                self._collection.find(query, {"userId": 0})
                .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
                .skip(skip)
                .limit(limit)
            )
            return list(cursor)

        documents = await run_sync(_page)
        total = await run_sync(self._collection.count_documents, query)

        records = [_to_interaction(document) for document in documents]
        views = await self._articles.get_views(
            record.article_id for record in records
        )
        for record in records:
            record.article = views.get(record.article_id)
        return records, total

    async def delete_for_article(self, article_id: str) -> int:
        result = await run_sync(
            self._collection.delete_many, {"articleId": parse_object_id(article_id)}
        )
        if result.deleted_count:
            logger.info(
                f"Removed {result.deleted_count} interactions of deleted article {article_id}"
            )
        return result.deleted_count
