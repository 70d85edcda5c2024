"""Request-scoped dependencies: body loading, collaborators and the current user."""

from __future__ import annotations

import logging
from typing import Any, Dict, Type, TypeVar

import jwt
import orjson
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from articlearc.analytics import InteractionAnalytics
from articlearc.config import Settings
from articlearc.errors import Unauthenticated
from articlearc.models import User
from articlearc.security import decode_access_token, extract_bearer_token
from articlearc.stores import ArticleStore, InteractionStore, UserStore
from articlearc.summarizer import SummaryProvider

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.users


def get_article_store(request: Request) -> ArticleStore:
    return request.app.state.articles


def get_interaction_store(request: Request) -> InteractionStore:
    return request.app.state.interactions


def get_analytics(request: Request) -> InteractionAnalytics:
    return request.app.state.analytics


def get_summary_provider(request: Request) -> SummaryProvider:
    return request.app.state.summary_provider


async def load_request_model(http_request: Request, model_cls: Type[ModelT]) -> ModelT:
    settings = get_app_settings(http_request)
    header_length = http_request.headers.get("content-length")
    if header_length:
        try:
            content_length = int(header_length)
        except ValueError:
            content_length = None
        else:
            if content_length > settings.max_payload_bytes:
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail={
                        "error": "payload_too_large",
                        "message": "Request body too large",
                        "limit_bytes": settings.max_payload_bytes,
                    },
                )

    body_bytes = await http_request.body()
    if body_bytes and len(body_bytes) > settings.max_payload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": "payload_too_large",
                "message": "Request body too large",
                "limit_bytes": settings.max_payload_bytes,
            },
        )

    if not body_bytes:
        data: Dict[str, Any] = {}
    else:
        try:
            data = orjson.loads(body_bytes)
        except orjson.JSONDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "invalid_json",
                    "message": "Request body is not valid JSON",
                    "details": str(exc),
                },
            ) from exc

    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def load_query_model(http_request: Request, model_cls: Type[ModelT]) -> ModelT:
    try:
        return model_cls.model_validate(dict(http_request.query_params))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


async def get_current_user(request: Request) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    token = extract_bearer_token(request.headers.get("authorization"))
    if token is None:
        raise Unauthenticated("Access token is required")

    settings = get_app_settings(request)
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired") from exc
    except jwt.PyJWTError as exc:
        logger.debug(f"Rejected bearer token: {exc}")
        raise Unauthenticated("Invalid token") from exc

    user = await get_user_store(request).get(str(payload.get("sub", "")))
    if user is None:
        raise Unauthenticated("Invalid token - user not found")
    return user
