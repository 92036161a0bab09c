"""User directory and mailbox routes."""

import pytest


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_list_users_sorted_without_private_fields(client, register_user):
    token = await register_user("carol")
    await register_user("alice")
    await register_user("bob")

    r = await client.get("/users", headers=_auth(token))
    assert r.status_code == 200
    users = r.json()["users"]
    assert [u["username"] for u in users] == ["alice", "bob", "carol"]
    for u in users:
        assert set(u) == {"username", "first_name", "last_name"}


@pytest.mark.asyncio
async def test_get_own_profile(client, register_user):
    token = await register_user("alice", first_name="Alice", phone="555-1234")

    r = await client.get("/users/alice", headers=_auth(token))
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["username"] == "alice"
    assert user["first_name"] == "Alice"
    assert user["phone"] == "555-1234"
    assert "join_at" in user
    assert "password" not in user


@pytest.mark.asyncio
async def test_other_users_profile_is_forbidden(client, register_user):
    await register_user("alice")
    bob = await register_user("bob")

    r = await client.get("/users/alice", headers=_auth(bob))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_inbox_and_outbox(client, register_user):
    alice = await register_user("alice")
    bob = await register_user("bob")

    await client.post("/messages", json={"to_username": "bob", "body": "first"}, headers=_auth(alice))
    await client.post("/messages", json={"to_username": "bob", "body": "second"}, headers=_auth(alice))

    r = await client.get("/users/bob/to", headers=_auth(bob))
    assert r.status_code == 200
    inbox = r.json()["messages"]
    assert [m["body"] for m in inbox] == ["second", "first"]
    assert inbox[0]["from_user"]["username"] == "alice"
    assert set(inbox[0]["from_user"]) == {"username", "first_name", "last_name", "phone"}
    assert "to_user" not in inbox[0]

    r = await client.get("/users/alice/from", headers=_auth(alice))
    assert r.status_code == 200
    outbox = r.json()["messages"]
    assert [m["body"] for m in outbox] == ["second", "first"]
    assert outbox[0]["to_user"]["username"] == "bob"
    assert outbox[0]["read_at"] is None


@pytest.mark.asyncio
async def test_empty_mailbox(client, register_user):
    token = await register_user("alice")
    r = await client.get("/users/alice/to", headers=_auth(token))
    assert r.status_code == 200
    assert r.json() == {"messages": []}


@pytest.mark.asyncio
async def test_someone_elses_mailbox_is_forbidden(client, register_user):
    await register_user("alice")
    carol = await register_user("carol")

    for path in ("/users/alice/to", "/users/alice/from"):
        r = await client.get(path, headers=_auth(carol))
        assert r.status_code == 401
