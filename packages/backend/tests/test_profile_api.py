"""Profile endpoint tests."""

import pytest

from conftest import auth_headers, register


@pytest.mark.asyncio
async def test_get_profile(client):
    user, token = await register(client, "me@example.com")
    r = await client.get("/api/v1/profile", headers=auth_headers(token))
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == user["id"]
    assert body["email"] == "me@example.com"
    assert "created_at" in body
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_update_email(client):
    _, token = await register(client, "old@example.com")
    r = await client.patch(
        "/api/v1/profile",
        json={"user": {"email": "Updated@Example.com"}},
        headers=auth_headers(token),
    )
    assert r.status_code == 200
    assert r.json()["email"] == "updated@example.com"

    r = await client.get("/api/v1/profile", headers=auth_headers(token))
    assert r.json()["email"] == "updated@example.com"


@pytest.mark.asyncio
async def test_update_invalid_email(client):
    _, token = await register(client, "keep@example.com")
    r = await client.patch(
        "/api/v1/profile",
        json={"user": {"email": "invalid-email"}},
        headers=auth_headers(token),
    )
    assert r.status_code == 422
    assert "email" in r.json()["errors"]

    r = await client.get("/api/v1/profile", headers=auth_headers(token))
    assert r.json()["email"] == "keep@example.com"


@pytest.mark.asyncio
async def test_update_to_taken_email(client):
    await register(client, "taken@example.com")
    _, token = await register(client, "mine@example.com")
    r = await client.patch(
        "/api/v1/profile",
        json={"user": {"email": "TAKEN@example.com"}},
        headers=auth_headers(token),
    )
    assert r.status_code == 422
    assert r.json()["errors"]["email"] == ["has already been taken"]


@pytest.mark.asyncio
async def test_update_to_same_email_is_noop(client):
    _, token = await register(client, "same@example.com")
    r = await client.patch(
        "/api/v1/profile",
        json={"user": {"email": "SAME@example.com"}},
        headers=auth_headers(token),
    )
    assert r.status_code == 200
    assert r.json()["email"] == "same@example.com"
