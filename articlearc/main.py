"""FastAPI application factory and global exception handling."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from articlearc import __version__ as app_version
from articlearc.analytics import InteractionAnalytics
from articlearc.api.routes import router
from articlearc.config import DEFAULT_JWT_SECRET, Settings, get_settings
from articlearc.errors import ServiceError
from articlearc.logging_config import configure_logging
from articlearc.stores import (
    ArticleStore,
    InteractionStore,
    UserStore,
    create_client,
    ensure_indexes,
    get_database,
)
from articlearc.summarizer import SummaryProvider, build_summary_provider

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


def create_application(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    summary_provider: Optional[SummaryProvider] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Collaborators default to ones built from ``settings``; tests pass their own.
    """
    settings = settings or get_settings()
    client = None
    if database is None:
        client = create_client(settings)
        database = get_database(client, settings)
    summary_provider = summary_provider or build_summary_provider(settings)

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is the development default; set it in production")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await ensure_indexes(database)
        yield
        if client is not None:
            client.close()

    app = FastAPI(
        title=settings.app_name,
        description="Articles, AI summaries and per-user interaction analytics.",
        version=app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.users = UserStore(database)
    app.state.articles = ArticleStore(database)
    app.state.interactions = InteractionStore(database, app.state.articles)
    app.state.analytics = InteractionAnalytics(database)
    app.state.summary_provider = summary_provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = _validation_details(exc)
        message = details[0]["msg"] if details else "Validation error"
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "validation_error",
                "message": message,
                "details": details,
            },
        )

    @app.exception_handler(ServiceError)
    async def service_exception_handler(
        request: Request, exc: ServiceError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload = {"success": False, **detail}
        elif detail == "There was an error parsing the body":
            payload = {"success": False, "error": "invalid_json", "message": detail}
        else:
            payload = {"success": False, "error": "http_error", "message": detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_error",
                "message": "Internal server error",
            },
        )

    app.include_router(router)
    return app


def build_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_application(settings)


app = build_app()
