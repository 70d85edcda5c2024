"""Versioned API router assembly and health check."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from articlearc import __version__ as app_version
from articlearc.api.articles import router as articles_router
from articlearc.api.auth import auth_router, users_router
from articlearc.api.deps import get_summary_provider
from articlearc.api.interactions import router as interactions_router
from articlearc.summarizer import SummaryProvider

router = APIRouter(prefix="/api/v1")


@router.get("/health", tags=["health"])
async def health(
    summary_provider: SummaryProvider = Depends(get_summary_provider),
) -> Dict[str, Any]:
    return {
        "success": True,
        "message": "ArticleArc API is running",
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": app_version,
        "summaryEngine": summary_provider.engine,
    }


router.include_router(auth_router)
router.include_router(users_router)
router.include_router(articles_router)
router.include_router(interactions_router)
