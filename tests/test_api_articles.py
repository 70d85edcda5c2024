import pytest
from bson import ObjectId

from articlearc.main import create_application
from articlearc.summarizer import SummaryProvider, extract
from httpx import ASGITransport, AsyncClient

from conftest import CONTENT, StubProvider, create_article, register


@pytest.mark.anyio
async def test_health_reports_summary_engine(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "ok"
    assert body["version"]
    assert body["summaryEngine"] == "extractive"


@pytest.mark.anyio
async def test_register_login_and_duplicate_user(client):
    user, _ = await register(client)
    assert user["username"] == "johndoe123"
    assert "password" not in user

    login = await client.post(
        "/api/v1/auth/login",
        json={"username": "johndoe123@example.com", "password": "SecurePass123"},
    )
    assert login.status_code == 200
    assert login.json()["data"]["token"]

    bad_login = await client.post(
        "/api/v1/auth/login", json={"username": "johndoe123", "password": "Wrong1"}
    )
    assert bad_login.status_code == 401
    assert bad_login.json()["message"] == "Invalid credentials"

    duplicate = await client.post(
        "/api/v1/auth/register",
        json={
            "username": "johndoe123",
            "email": "other@example.com",
            "password": "SecurePass123",
        },
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "User with this username already exists"


@pytest.mark.anyio
async def test_register_rejects_weak_password(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "weakling", "email": "weak@example.com", "password": "short"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


@pytest.mark.anyio
async def test_create_user_without_token(client):
    response = await client.post(
        "/api/v1/users",
        json={
            "username": "techguru",
            "email": "Tech.Guru@Example.com",
            "password": "TechPass123",
            "interests": [" Technology ", "AI"],
        },
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "tech.guru@example.com"
    assert data["interests"] == ["technology", "ai"]
    assert "token" not in data


@pytest.mark.anyio
async def test_create_article_generates_extractive_summary(client):
    _, headers = await register(client)
    article = await create_article(client, headers, tags=[" AI ", "Science"])

    assert article["summary"] == extract(CONTENT)
    assert article["author"] == "johndoe123"
    assert article["tags"] == ["ai", "science"]


@pytest.mark.anyio
async def test_summary_fallback_scenario_text(client):
    _, headers = await register(client)
    content = (
        "Short. This is a sufficiently long sentence for extraction. "
        "Another qualifying sentence here now."
    )
    article = await create_article(client, headers, content=content)
    assert article["summary"] == (
        "This is a sufficiently long sentence for extraction. "
        "Another qualifying sentence here now."
    )


@pytest.mark.anyio
async def test_manual_summary_is_kept(client):
    _, headers = await register(client)
    article = await create_article(client, headers, summary="  Written by hand.  ")
    assert article["summary"] == "Written by hand."


@pytest.mark.anyio
async def test_failed_ai_call_falls_back(settings, database):
    provider = SummaryProvider(provider=StubProvider(error=RuntimeError("quota")))
    app = create_application(
        settings=settings, database=database, summary_provider=provider
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        _, headers = await register(client)
        article = await create_article(client, headers)
    assert article["summary"] == extract(CONTENT)


@pytest.mark.anyio
async def test_ai_summary_is_stored(settings, database):
    provider = SummaryProvider(provider=StubProvider(reply="An AI written summary."))
    app = create_application(
        settings=settings, database=database, summary_provider=provider
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        _, headers = await register(client)
        article = await create_article(client, headers)
    assert article["summary"] == "An AI written summary."


@pytest.mark.anyio
async def test_article_validation_and_auth(client):
    unauthenticated = await client.post(
        "/api/v1/articles", json={"title": "Valid title", "content": CONTENT}
    )
    assert unauthenticated.status_code == 401
    assert unauthenticated.json()["message"] == "Access token is required"

    invalid_token = await client.post(
        "/api/v1/articles",
        json={"title": "Valid title", "content": CONTENT},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert invalid_token.status_code == 401

    _, headers = await register(client)
    too_short = await client.post(
        "/api/v1/articles",
        json={"title": "Hey", "content": "too short"},
        headers=headers,
    )
    assert too_short.status_code == 400

    too_many_tags = await client.post(
        "/api/v1/articles",
        json={"title": "Valid title", "content": CONTENT, "tags": ["t"] * 11},
        headers=headers,
    )
    assert too_many_tags.status_code == 400


@pytest.mark.anyio
async def test_list_and_get_articles(client):
    _, headers = await register(client)
    first = await create_article(client, headers, title="First article")
    second = await create_article(client, headers, title="Second article")

    listing = await client.get("/api/v1/articles", params={"limit": 1})
    assert listing.status_code == 200
    body = listing.json()
    assert [item["id"] for item in body["data"]] == [second["id"]]
    assert body["pagination"]["totalCount"] == 2
    assert body["pagination"]["hasNext"] is True

    fetched = await client.get(f"/api/v1/articles/{first['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["title"] == "First article"

    assert (await client.get("/api/v1/articles/not-an-id")).status_code == 400
    assert (await client.get(f"/api/v1/articles/{ObjectId()}")).status_code == 404
    assert (await client.get("/api/v1/articles", params={"limit": 101})).status_code == 400


@pytest.mark.anyio
async def test_update_article_rules(client):
    _, owner = await register(client)
    _, stranger = await register(client, username="stranger")
    article = await create_article(client, owner, summary="Original summary.")
    url = f"/api/v1/articles/{article['id']}"

    forbidden = await client.put(
        url, json={"title": "Hijacked title", "content": CONTENT}, headers=stranger
    )
    assert forbidden.status_code == 403

    same_content = await client.put(
        url, json={"title": "Renamed article", "content": CONTENT}, headers=owner
    )
    assert same_content.status_code == 200
    assert same_content.json()["data"]["summary"] == "Original summary."
    assert same_content.json()["data"]["title"] == "Renamed article"

    new_content = CONTENT + " A further qualifying sentence is appended here."
    changed = await client.put(
        url, json={"title": "Renamed article", "content": new_content}, headers=owner
    )
    assert changed.json()["data"]["summary"] == extract(new_content)

    missing = await client.put(
        f"/api/v1/articles/{ObjectId()}",
        json={"title": "Renamed article", "content": CONTENT},
        headers=owner,
    )
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_delete_article_cascades_interactions(client, database):
    _, owner = await register(client)
    _, stranger = await register(client, username="stranger")
    article = await create_article(client, owner)
    await client.post(
        "/api/v1/interactions",
        json={"articleId": article["id"], "interactionType": "view"},
        headers=stranger,
    )
    url = f"/api/v1/articles/{article['id']}"

    assert (await client.delete(url, headers=stranger)).status_code == 403
    deleted = await client.delete(url, headers=owner)
    assert deleted.status_code == 200
    assert (await client.get(url)).status_code == 404
    assert database["interactions"].count_documents({}) == 0


@pytest.mark.anyio
async def test_malformed_json_body(client):
    _, headers = await register(client)
    response = await client.post(
        "/api/v1/articles",
        content="not valid json",
        headers={**headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_json"


@pytest.mark.anyio
async def test_article_id_with_trailing_newline_is_rejected(client):
    _, headers = await register(client)
    article = await create_article(client, headers)
    url = f"/api/v1/articles/{article['id']}%0A"

    fetched = await client.get(url)
    assert fetched.status_code == 400
    assert fetched.json()["message"] == "Invalid article ID"

    updated = await client.put(
        url, json={"title": "Renamed article", "content": CONTENT}, headers=headers
    )
    assert updated.status_code == 400
    assert (await client.delete(url, headers=headers)).status_code == 400


@pytest.mark.anyio
async def test_blank_tag_is_rejected(client):
    _, headers = await register(client)
    response = await client.post(
        "/api/v1/articles",
        json={"title": "Valid title", "content": CONTENT, "tags": ["   ", "AI"]},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


@pytest.mark.anyio
async def test_password_hashing_runs_off_the_event_loop(client, monkeypatch):
    from articlearc.api import auth

    offloaded = []

    async def recording_run_sync(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return func(*args, **kwargs)

    monkeypatch.setattr(auth, "run_sync", recording_run_sync)

    await register(client)
    login = await client.post(
        "/api/v1/auth/login",
        json={"username": "johndoe123", "password": "SecurePass123"},
    )
    assert login.status_code == 200
    assert offloaded == ["hash_password", "verify_password"]
