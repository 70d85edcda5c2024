"""Article CRUD with synchronous summary population."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from articlearc.api.deps import (
    get_article_store,
    get_current_user,
    get_interaction_store,
    get_summary_provider,
    load_query_model,
    load_request_model,
)
from articlearc.api.schemas import (
    ArticleModel,
    ArticleRequestModel,
    PaginationQueryModel,
    envelope,
)
from articlearc.errors import ArticleNotFound, Forbidden
from articlearc.models import Article, User
from articlearc.pagination import build_meta, resolve
from articlearc.stores import ArticleStore, InteractionStore
from articlearc.stores.base import parse_object_id
from articlearc.summarizer import SummaryProvider, resolve_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])


async def load_article_request(http_request: Request) -> ArticleRequestModel:
    return await load_request_model(http_request, ArticleRequestModel)


def load_pagination_query(http_request: Request) -> PaginationQueryModel:
    return load_query_model(http_request, PaginationQueryModel)


async def _owned_article(
    store: ArticleStore, article_id: str, user: User, action: str
) -> Article:
    parse_object_id(article_id, message="Invalid article ID")
    article = await store.get(article_id)
    if article is None:
        raise ArticleNotFound()
    if article.created_by != user.id:
        raise Forbidden(f"Not authorized to {action} this article")
    return article


@router.get("")
async def list_articles(
    query: PaginationQueryModel = Depends(load_pagination_query),
    store: ArticleStore = Depends(get_article_store),
):
    page_params = resolve(query.page, query.limit, query.offset)
    articles, total = await store.list_recent(page_params.skip, page_params.limit)
    meta = build_meta(page_params.page, page_params.limit, total)
    return envelope(
        "Articles retrieved successfully",
        [ArticleModel.from_domain(article) for article in articles],
        pagination=meta.to_dict(),
    )


@router.get("/{article_id}")
async def get_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
):
    parse_object_id(article_id, message="Invalid article ID")
    article = await store.get(article_id)
    if article is None:
        raise ArticleNotFound()
    return envelope("Article retrieved successfully", ArticleModel.from_domain(article))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_article(
    user: User = Depends(get_current_user),
    article_request: ArticleRequestModel = Depends(load_article_request),
    store: ArticleStore = Depends(get_article_store),
    summary_provider: SummaryProvider = Depends(get_summary_provider),
):
    summary = article_request.summary
    if summary is None:
        resolved = await resolve_summary(
            summary_provider, article_request.content, article_request.title
        )
        summary = resolved.text
        logger.info(f"Summary for new article by {user.username} from {resolved.source}")

    article = await store.create(
        title=article_request.title,
        content=article_request.content,
        author=user.username,
        summary=summary,
        tags=article_request.tags,
        created_by=user.id,
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope("Article created successfully", ArticleModel.from_domain(article)),
    )


@router.put("/{article_id}")
async def update_article(
    article_id: str,
    user: User = Depends(get_current_user),
    article_request: ArticleRequestModel = Depends(load_article_request),
    store: ArticleStore = Depends(get_article_store),
    summary_provider: SummaryProvider = Depends(get_summary_provider),
):
    article = await _owned_article(store, article_id, user, "update")

    changes: Dict[str, Any] = {
        "title": article_request.title,
        "content": article_request.content,
        "tags": article_request.tags,
    }
    if article_request.summary is not None:
        changes["summary"] = article_request.summary
    elif article_request.content != article.content:
        resolved = await resolve_summary(
            summary_provider, article_request.content, article_request.title
        )
        changes["summary"] = resolved.text
        logger.info(f"Summary for article {article_id} regenerated from {resolved.source}")

    updated = await store.update(article_id, changes)
    if updated is None:
        raise ArticleNotFound()
    return envelope("Article updated successfully", ArticleModel.from_domain(updated))


@router.delete("/{article_id}")
async def delete_article(
    article_id: str,
    user: User = Depends(get_current_user),
    store: ArticleStore = Depends(get_article_store),
    interactions: InteractionStore = Depends(get_interaction_store),
):
    await _owned_article(store, article_id, user, "delete")
    await store.delete(article_id)
    await interactions.delete_for_article(article_id)
    return envelope("Article deleted successfully")
