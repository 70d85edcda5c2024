"""Registration, login and account creation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from articlearc.api.deps import (
    get_app_settings,
    get_user_store,
    load_request_model,
)
from articlearc.api.schemas import (
    AuthPayloadModel,
    LoginRequestModel,
    RegisterRequestModel,
    UserModel,
    envelope,
)
from articlearc.config import Settings
from articlearc.errors import Unauthenticated
from articlearc.models import User
from articlearc.security import create_access_token, hash_password, verify_password
from articlearc.stores import UserStore
from articlearc.stores.base import run_sync

auth_router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


async def load_register_request(http_request: Request) -> RegisterRequestModel:
    return await load_request_model(http_request, RegisterRequestModel)


async def load_login_request(http_request: Request) -> LoginRequestModel:
    return await load_request_model(http_request, LoginRequestModel)


async def _create_user(store: UserStore, request: RegisterRequestModel) -> User:
    return await store.create(
        username=request.username,
        email=request.email,
        password_hash=await run_sync(hash_password, request.password),
        interests=request.interests,
    )


def _auth_payload(user: User, settings: Settings) -> AuthPayloadModel:
    return AuthPayloadModel(
        user=UserModel.from_domain(user),
        token=create_access_token(user, settings),
    )


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    register_request: RegisterRequestModel = Depends(load_register_request),
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    user = await _create_user(store, register_request)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope("User registered successfully", _auth_payload(user, settings)),
    )


@auth_router.post("/login")
async def login(
    login_request: LoginRequestModel = Depends(load_login_request),
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    found = await store.get_credentials(login_request.username)
    if found is None:
        raise Unauthenticated("Invalid credentials")
    user, password_hash = found
    if not await run_sync(verify_password, login_request.password, password_hash):
        raise Unauthenticated("Invalid credentials")
    return envelope("Login successful", _auth_payload(user, settings))


@users_router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    register_request: RegisterRequestModel = Depends(load_register_request),
    store: UserStore = Depends(get_user_store),
):
    user = await _create_user(store, register_request)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope("User created successfully", UserModel.from_domain(user)),
    )
