#!/usr/bin/env python3
"""
Tasklist Quickstart — the whole account + todo lifecycle in one script.

Registers a user → logs in → creates/updates/deletes todos → shows that a
second user can't see them → deletes both accounts.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"
PASSWORD = "Demo-password-123!"


def register(client: httpx.Client, email: str) -> tuple[dict, dict]:
    """Register and return (user, auth headers)."""
    resp = client.post("/users", json={"user": {"email": email, "password": PASSWORD}})
    assert resp.status_code == 201, f"Registration failed: {resp.text}"
    body = resp.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        print("Start it with:  tasklist serve")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {health['database']}")
    print(f"  Redis:    {health['redis']}")

    # ── Register (mixed-case email is stored lowercased) ──────────
    print("\n1. Registering alice...")
    alice, alice_auth = register(client, f"Alice-{run_id}@Example.com")
    print(f"   {alice['email']} (id {alice['id']})")

    # ── Login ─────────────────────────────────────────────────────
    print("\n2. Logging in with the lowercase email...")
    resp = client.post("/login", json={"email": alice["email"], "password": PASSWORD})
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    alice_auth = {"Authorization": f"Bearer {resp.json()['token']}"}
    print("   Got a fresh token")

    # ── Todos ─────────────────────────────────────────────────────
    print("\n3. Creating todos...")
    ids = []
    for title in ("Buy milk", "Write report", "Call mom"):
        resp = client.post("/todos", json={"todo": {"title": title}}, headers=alice_auth)
        assert resp.status_code == 201, f"Failed: {resp.text}"
        ids.append(resp.json()["id"])
        print(f"   #{ids[-1]} {title}")

    print("\n4. Completing the first one...")
    resp = client.patch(f"/todos/{ids[0]}", json={"todo": {"completed": True}}, headers=alice_auth)
    print(f"   #{ids[0]} completed={resp.json()['completed']}")

    print("\n5. Deleting the last one...")
    resp = client.delete(f"/todos/{ids[-1]}", headers=alice_auth)
    print(f"   status {resp.status_code}")

    # ── Isolation ─────────────────────────────────────────────────
    print("\n6. Registering bob and poking at alice's data...")
    bob, bob_auth = register(client, f"bob-{run_id}@example.com")
    resp = client.get("/todos", headers=bob_auth)
    print(f"   bob's list: {len(resp.json())} todos")
    resp = client.get(f"/todos/{ids[0]}", headers=bob_auth)
    print(f"   bob reading alice's todo: {resp.status_code} {resp.json()}")
    resp = client.delete(f"/users/{alice['id']}", headers=bob_auth)
    print(f"   bob deleting alice's account: {resp.status_code} {resp.json()}")

    # ── Cleanup ───────────────────────────────────────────────────
    print("\n7. Deleting both accounts...")
    for user, auth in ((alice, alice_auth), (bob, bob_auth)):
        resp = client.delete(f"/users/{user['id']}", headers=auth)
        print(f"   {user['email']}: {resp.json()['message']}")

    resp = client.get("/todos", headers=alice_auth)
    print(f"\nAlice's old token now: {resp.status_code} {resp.json()}")


if __name__ == "__main__":
    main()
