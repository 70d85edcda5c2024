"""Per-kind interaction counts and the combined listing read."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import anyio
from pymongo.database import Database

from articlearc.models import (
    Interaction,
    InteractionFilters,
    InteractionKind,
    InteractionPage,
    InteractionStats,
)
from articlearc.pagination import PageParams
from articlearc.stores.base import run_sync
from articlearc.stores.interactions import InteractionStore, build_interaction_filter

logger = logging.getLogger(__name__)


class InteractionAnalytics:
    """Aggregate counts over the full set matched by a user's interaction filters."""

    def __init__(self, database: Database) -> None:
        self._collection = database["interactions"]

    async def aggregate(
        self, user_id: str, filters: Optional[InteractionFilters] = None
    ) -> InteractionStats:
        pipeline = [
            {"$match": build_interaction_filter(user_id, filters)},
            {"$group": {"_id": "$interactionType", "count": {"$sum": 1}}},
        ]
        rows: List[Dict[str, Any]] = await run_sync(
            lambda: list(self._collection.aggregate(pipeline))
        )

        stats = InteractionStats()
        for row in rows:
            if row["_id"] == InteractionKind.VIEW.value:
                stats.views = row["count"]
            elif row["_id"] == InteractionKind.LIKE.value:
                stats.likes = row["count"]
            elif row["_id"] == InteractionKind.SHARE.value:
                stats.shares = row["count"]
        return stats


async def list_interactions(
    store: InteractionStore,
    analytics: InteractionAnalytics,
    user_id: str,
    filters: Optional[InteractionFilters],
    page_params: PageParams,
) -> InteractionPage:
    """
    Fetch one page of a user's interactions together with their kind counts.

    The page query and the aggregate are independent reads issued concurrently.
    On a quiescent store ``stats.total == total_count``; concurrent writes
    between the two reads can make them disagree transiently.
    """
    # Malformed identifiers fail here rather than inside the task group
    build_interaction_filter(user_id, filters)

    records: List[Interaction] = []
    total_count = 0
    stats = InteractionStats()

    async def _load_page() -> None:
        nonlocal records, total_count
        records, total_count = await store.query_interactions(
            user_id, filters, page_params.skip, page_params.limit
        )

    async def _load_stats() -> None:
        nonlocal stats
        stats = await analytics.aggregate(user_id, filters)

    async with anyio.create_task_group() as tg:
        tg.start_soon(_load_page)
        tg.start_soon(_load_stats)

    if stats.total != total_count:
        logger.warning(
            f"Interaction stats ({stats.total}) and total ({total_count}) diverged "
            f"for user {user_id}; concurrent writes during listing"
        )
    return InteractionPage(records=records, total_count=total_count, stats=stats)
