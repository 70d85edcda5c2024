"""Interaction recording and the per-user listing with kind counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from articlearc.analytics import InteractionAnalytics, list_interactions
from articlearc.api.deps import (
    get_analytics,
    get_current_user,
    get_interaction_store,
    load_query_model,
    load_request_model,
)
from articlearc.api.schemas import (
    InteractionModel,
    InteractionQueryModel,
    InteractionRequestModel,
    InteractionStatsModel,
    envelope,
)
from articlearc.models import InteractionFilters, User
from articlearc.pagination import build_meta, resolve
from articlearc.stores import InteractionStore

router = APIRouter(prefix="/interactions", tags=["interactions"])


async def load_interaction_request(http_request: Request) -> InteractionRequestModel:
    return await load_request_model(http_request, InteractionRequestModel)


def load_interaction_query(http_request: Request) -> InteractionQueryModel:
    return load_query_model(http_request, InteractionQueryModel)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_interaction(
    user: User = Depends(get_current_user),
    interaction_request: InteractionRequestModel = Depends(load_interaction_request),
    store: InteractionStore = Depends(get_interaction_store),
):
    interaction, is_new = await store.record_interaction(
        user.id, interaction_request.article_id, interaction_request.interaction_type
    )
    data = InteractionModel.from_domain(interaction)
    if not is_new:
        # Repeat submissions are an idempotent read of the stored record.
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=envelope("Interaction already exists", data, alreadyExists=True),
        )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope("Interaction recorded successfully", data, alreadyExists=False),
    )


@router.get("")
async def get_user_interactions(
    user: User = Depends(get_current_user),
    query: InteractionQueryModel = Depends(load_interaction_query),
    store: InteractionStore = Depends(get_interaction_store),
    analytics: InteractionAnalytics = Depends(get_analytics),
):
    page_params = resolve(query.page, query.limit, query.offset)
    filters = InteractionFilters(kind=query.interaction_type, article_id=query.article_id)

    result = await list_interactions(store, analytics, user.id, filters, page_params)

    meta = build_meta(page_params.page, page_params.limit, result.total_count)
    return envelope(
        "Interactions retrieved successfully",
        [InteractionModel.from_domain(record) for record in result.records],
        pagination=meta.to_dict(),
        stats=InteractionStatsModel.from_domain(result.stats),
    )
