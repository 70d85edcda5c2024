"""Articles collection."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database

from articlearc.models import Article, ArticleView, utc_now
from articlearc.stores.base import is_object_id, parse_object_id, run_sync

logger = logging.getLogger(__name__)

VIEW_PROJECTION = {"title": 1, "author": 1, "tags": 1, "summary": 1}


def _to_article(document: Dict[str, Any]) -> Article:
    return Article(
        id=str(document["_id"]),
        title=document["title"],
        content=document["content"],
        author=document["author"],
        summary=document.get("summary", ""),
        created_by=str(document["createdBy"]),
        tags=list(document.get("tags", [])),
        created_at=document["createdAt"],
        updated_at=document["updatedAt"],
    )


def _to_view(document: Dict[str, Any]) -> ArticleView:
    return ArticleView(
        id=str(document["_id"]),
        title=document["title"],
        author=document["author"],
        summary=document.get("summary", ""),
        tags=list(document.get("tags", [])),
    )


class ArticleStore:
    def __init__(self, database: Database) -> None:
        self._collection = database["articles"]

    async def ensure_indexes(self) -> None:
        await run_sync(self._collection.create_index, [("tags", ASCENDING)])
        await run_sync(self._collection.create_index, [("createdBy", ASCENDING)])
        await run_sync(self._collection.create_index, [("createdAt", DESCENDING)])

    async def create(
        self,
        *,
        title: str,
        content: str,
        author: str,
        summary: str,
        tags: List[str],
        created_by: str,
    ) -> Article:
        now = utc_now()
        document = {
            "title": title,
            "content": content,
            "author": author,
            "summary": summary,
            "tags": tags,
            "createdBy": parse_object_id(created_by),
            "createdAt": now,
            "updatedAt": now,
        }
        await run_sync(self._collection.insert_one, document)
        logger.info(f"Created article {document['_id']} by {author}")
        return _to_article(document)

    async def get(self, article_id: str) -> Optional[Article]:
        if not is_object_id(article_id):
            return None
        document = await run_sync(
            self._collection.find_one, {"_id": parse_object_id(article_id)}
        )
        return _to_article(document) if document else None

    async def exists(self, article_id: str) -> bool:
        if not is_object_id(article_id):
            return False
        document = await run_sync(
            self._collection.find_one,
            {"_id": parse_object_id(article_id)},
            {"_id": 1},
        )
        return document is not None

    async def list_recent(self, skip: int, limit: int) -> Tuple[List[Article], int]:
        def _page() -> List[Dict[str, Any]]:
            cursor = (
                self._collection.find({})
                .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
                .skip(skip)
                .limit(limit)
            )
            return list(cursor)

        documents = await run_sync(_page)
        total = await run_sync(self._collection.count_documents, {})
        return [_to_article(document) for document in documents], total

    async def update(self, article_id: str, fields: Dict[str, Any]) -> Optional[Article]:
        changes = dict(fields)
        changes["updatedAt"] = utc_now()
        document = await run_sync(
            self._collection.find_one_and_update,
            {"_id": parse_object_id(article_id)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _to_article(document) if document else None

    async def delete(self, article_id: str) -> bool:
        result = await run_sync(
            self._collection.delete_one, {"_id": parse_object_id(article_id)}
        )
        return result.deleted_count > 0

    async def get_views(self, article_ids: Iterable[Any]) -> Dict[str, ArticleView]:
        """Display fields for each referenced article that still exists."""
        ids = list({parse_object_id(article_id) for article_id in article_ids})
        if not ids:
            return {}
        documents = await run_sync(
            lambda: list(
                self._collection.find({"_id": {"$in": ids}}, VIEW_PROJECTION)
            )
        )
        return {str(document["_id"]): _to_view(document) for document in documents}
