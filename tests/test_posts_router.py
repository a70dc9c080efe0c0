"""
Tests for the posts router: status mapping, caller header and the BizResponse
envelope, with the store and key-value dependencies overridden.
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.routers import posts
from app.storage.database import get_db, get_kv_store


@pytest.fixture
def client(db, kv, users):
    app = FastAPI()
    app.include_router(posts.posts_router)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_kv_store] = lambda: kv
    return TestClient(app)


def create_post(client, user="u1", category="자유", title="T1", content="C1"):
    return client.post(
        "/posts/",
        json={"category": category, "title": title, "content": content},
        headers={"X-User-Id": user},
    )


def test_create_and_get(client):
    resp = create_post(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["code"] == 201
    pid = body["data"]["pid"]
    assert body["data"]["view_count"] == 0
    assert body["data"]["category"] == "자유"

    resp = client.get(f"/posts/{pid}")
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "T1"
    assert resp.json()["data"]["author_nickname"] == "alice"


def test_create_without_caller_is_401(client):
    resp = client.post("/posts/", json={"category": "자유", "title": "T", "content": "C"})
    assert resp.status_code == 401


def test_create_with_invalid_category_is_400(client):
    assert create_post(client, category="공지").status_code == 400


def test_create_with_unknown_user_is_404(client):
    assert create_post(client, user="ghost").status_code == 404


def test_get_unknown_post_is_404(client):
    assert client.get("/posts/does-not-exist").status_code == 404


def test_update_by_owner_and_non_owner(client):
    pid = create_post(client).json()["data"]["pid"]

    resp = client.put(f"/posts/{pid}", json={"title": "hijacked"}, headers={"X-User-Id": "u2"})
    assert resp.status_code == 403

    resp = client.put(f"/posts/{pid}", json={"title": "T2"}, headers={"X-User-Id": "u1"})
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "T2"
    assert resp.json()["data"]["content"] == "C1"


def test_counts_and_delete(client):
    pid = create_post(client).json()["data"]["pid"]
    create_post(client, category="질문")

    assert client.get("/posts/count").json()["data"]["count"] == 2
    assert client.get("/posts/count/자유").json()["data"]["count"] == 1

    assert client.delete(f"/posts/{pid}", headers={"X-User-Id": "u2"}).status_code == 403
    assert client.delete(f"/posts/{pid}", headers={"X-User-Id": "u1"}).status_code == 200

    assert client.get("/posts/count").json()["data"]["count"] == 1
    assert client.get("/posts/count/자유").json()["data"]["count"] == 0
    assert client.get(f"/posts/{pid}").status_code == 404


def test_list_and_sorted_by_views(client, kv):
    first = create_post(client, title="first").json()["data"]["pid"]
    second = create_post(client, title="second").json()["data"]["pid"]
    kv.set(f"view-count:{second}", "9")

    listed = client.get("/posts/").json()["data"]
    assert [p["pid"] for p in listed["items"]] == [first, second]

    ranked = client.get("/posts/sorted/views").json()["data"]
    assert [p["pid"] for p in ranked["items"]] == [second, first]


def test_update_and_delete_without_caller_are_401(client):
    pid = create_post(client).json()["data"]["pid"]

    assert client.put(f"/posts/{pid}", json={"title": "T2"}).status_code == 401
    resp = client.delete(f"/posts/{pid}")
    assert resp.status_code == 401
    assert resp.json()["data"] is False


def test_delete_unknown_post_is_404(client):
    resp = client.delete("/posts/does-not-exist", headers={"X-User-Id": "u1"})
    assert resp.status_code == 404
    assert resp.json()["data"] is False


def test_unexpected_error_is_500(client):
    with patch("app.routers.posts.post_svc.list_posts", side_effect=RuntimeError("boom")):
        resp = client.get("/posts/")

    assert resp.status_code == 500
    assert resp.json()["msg"] == "boom"
