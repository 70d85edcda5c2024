import pytest
from bson import ObjectId

from conftest import create_article, register


async def record(client, headers, article_id, kind):
    return await client.post(
        "/api/v1/interactions",
        json={"articleId": article_id, "interactionType": kind},
        headers=headers,
    )


@pytest.mark.anyio
async def test_record_interaction_then_duplicate(client):
    _, headers = await register(client)
    article = await create_article(client, headers)

    first = await record(client, headers, article["id"], "like")
    assert first.status_code == 201
    first_body = first.json()
    assert first_body["success"] is True
    assert first_body["message"] == "Interaction recorded successfully"
    assert first_body["alreadyExists"] is False
    assert first_body["data"]["interactionType"] == "like"
    assert first_body["data"]["articleId"] == article["id"]
    assert "userId" not in first_body["data"]

    second = await record(client, headers, article["id"], "like")
    assert second.status_code == 200
    second_body = second.json()
    assert second_body["success"] is True
    assert second_body["message"] == "Interaction already exists"
    assert second_body["alreadyExists"] is True
    assert second_body["data"]["id"] == first_body["data"]["id"]
    assert second_body["data"]["createdAt"] == first_body["data"]["createdAt"]


@pytest.mark.anyio
async def test_each_kind_is_recorded_separately(client):
    _, headers = await register(client)
    article = await create_article(client, headers)

    for kind in ("view", "like", "share"):
        response = await record(client, headers, article["id"], kind)
        assert response.status_code == 201

    listing = await client.get("/api/v1/interactions", headers=headers)
    body = listing.json()
    assert body["pagination"]["totalCount"] == 3
    assert body["stats"] == {"totalViews": 1, "totalLikes": 1, "totalShares": 1}


@pytest.mark.anyio
async def test_record_interaction_rejections(client):
    _, headers = await register(client)
    article = await create_article(client, headers)

    unknown_kind = await record(client, headers, article["id"], "bookmark")
    assert unknown_kind.status_code == 400
    assert unknown_kind.json()["error"] == "validation_error"

    bad_id = await record(client, headers, "not-an-id", "view")
    assert bad_id.status_code == 400

    missing = await record(client, headers, str(ObjectId()), "view")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Article not found"

    anonymous = await client.post(
        "/api/v1/interactions",
        json={"articleId": article["id"], "interactionType": "view"},
    )
    assert anonymous.status_code == 401


@pytest.mark.anyio
async def test_listing_is_scoped_to_caller(client):
    _, alice = await register(client, username="alice")
    _, bob = await register(client, username="bob")
    article = await create_article(client, alice)

    await record(client, alice, article["id"], "view")
    await record(client, bob, article["id"], "view")
    await record(client, bob, article["id"], "share")

    alice_listing = (await client.get("/api/v1/interactions", headers=alice)).json()
    assert alice_listing["pagination"]["totalCount"] == 1
    assert alice_listing["stats"]["totalShares"] == 0

    bob_listing = (await client.get("/api/v1/interactions", headers=bob)).json()
    assert bob_listing["pagination"]["totalCount"] == 2
    assert bob_listing["data"][0]["interactionType"] == "share"
    assert bob_listing["data"][0]["article"]["title"] == article["title"]
    assert all("userId" not in item for item in bob_listing["data"])


@pytest.mark.anyio
async def test_listing_pagination_and_filters(client):
    _, headers = await register(client)
    first = await create_article(client, headers, title="First article")
    second = await create_article(client, headers, title="Second article")
    for article in (first, second):
        for kind in ("view", "like"):
            await record(client, headers, article["id"], kind)

    page = await client.get(
        "/api/v1/interactions", params={"page": 2, "limit": 3}, headers=headers
    )
    body = page.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {
        "page": 2,
        "totalPages": 2,
        "totalCount": 4,
        "limit": 3,
        "hasNext": False,
        "hasPrev": True,
    }
    stats = body["stats"]
    assert stats["totalViews"] + stats["totalLikes"] + stats["totalShares"] == 4

    likes = await client.get(
        "/api/v1/interactions", params={"interactionType": "like"}, headers=headers
    )
    likes_body = likes.json()
    assert likes_body["pagination"]["totalCount"] == 2
    assert likes_body["stats"] == {"totalViews": 0, "totalLikes": 2, "totalShares": 0}

    by_article = await client.get(
        "/api/v1/interactions", params={"articleId": first["id"]}, headers=headers
    )
    assert by_article.json()["pagination"]["totalCount"] == 2


@pytest.mark.anyio
async def test_empty_listing(client):
    _, headers = await register(client)
    body = (await client.get("/api/v1/interactions", headers=headers)).json()
    assert body["data"] == []
    assert body["pagination"]["totalPages"] == 0
    assert body["pagination"]["hasNext"] is False
    assert body["pagination"]["hasPrev"] is False
    assert body["stats"] == {"totalViews": 0, "totalLikes": 0, "totalShares": 0}


@pytest.mark.anyio
@pytest.mark.parametrize(
    "params",
    [
        {"page": 0},
        {"limit": 101},
        {"interactionType": "bookmark"},
        {"articleId": "123"},
    ],
)
async def test_listing_rejects_bad_query(client, params):
    _, headers = await register(client)
    response = await client.get("/api/v1/interactions", params=params, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
