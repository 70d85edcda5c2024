"""Pytest configuration for tests."""

from typing import Optional

import mongomock
import pytest
from httpx import ASGITransport, AsyncClient

from articlearc.config import get_settings
from articlearc.main import create_application
from articlearc.stores import ArticleStore, InteractionStore, ensure_indexes
from articlearc.summarizer import SummaryProvider
from articlearc.summarizer.providers import LLMProvider

CONTENT = (
    "Artificial intelligence is rapidly evolving and transforming many industries. "
    "From healthcare to finance, applications are becoming more sophisticated. "
    "This article explores current trends and future possibilities in the field."
)


class StubProvider(LLMProvider):
    """LLM provider returning a canned reply, or raising a canned error."""

    name = "stub"

    def __init__(self, reply: str = "AI summary.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def settings():
    return get_settings().model_copy(
        update={"jwt_secret": "test-secret", "llm_provider": "none"}
    )


@pytest.fixture
async def database():
    db = mongomock.MongoClient()["articlearc_test"]
    await ensure_indexes(db)
    return db


@pytest.fixture
def article_store(database):
    return ArticleStore(database)


@pytest.fixture
def interaction_store(database, article_store):
    return InteractionStore(database, article_store)


@pytest.fixture
def summary_provider():
    return SummaryProvider(provider=None)


@pytest.fixture
def test_app(settings, database, summary_provider):
    return create_application(
        settings=settings, database=database, summary_provider=summary_provider
    )


@pytest.fixture
async def client(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://testserver"
    ) as http_client:
        yield http_client


async def register(client, username="johndoe123", email=None, password="SecurePass123"):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()["data"]
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


async def create_article(client, headers, **overrides):
    payload = {"title": "The Future of Artificial Intelligence", "content": CONTENT}
    payload.update(overrides)
    response = await client.post("/api/v1/articles", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
