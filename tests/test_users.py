"""Tests for user profile and role endpoints."""

from bson import ObjectId

from bookstore_api.app.core.config import settings


def _create(client, **fields):
    return client.post("/users", json={"email": "reader@example.com", "name": "Reader", **fields})


def test_create_user_defaults_role(client, db):
    response = _create(client)

    assert response.status_code == 200
    user = db["user"].find_one({"email": "reader@example.com"})
    assert user["role"] == settings.default_role
    assert "createdAt" in user


def test_create_user_keeps_given_role(client, db):
    _create(client, role="librarian")
    assert db["user"].find_one({"email": "reader@example.com"})["role"] == "librarian"


def test_create_existing_user_is_a_noop(client, db):
    first = _create(client).json()
    second = _create(client, name="Someone Else").json()

    assert first["insertedId"]
    assert second["insertedId"] is None
    assert db["user"].count_documents({}) == 1
    assert db["user"].find_one({})["name"] == "Reader"


def test_create_user_ignores_client_identifiers(client, db):
    response = _create(client, _id="abc", id="abc")

    user_id = response.json()["insertedId"]
    assert ObjectId.is_valid(user_id)
    assert "id" not in db["user"].find_one({"_id": ObjectId(user_id)})
    assert client.patch(f"/users/{user_id}/role", json={"role": "librarian"}).status_code == 200


def test_create_user_requires_email(client):
    assert client.post("/users", json={"name": "Nobody"}).status_code == 400


def test_list_users(client):
    _create(client)
    _create(client, email="other@example.com")
    assert len(client.get("/users").json()) == 2


def test_get_role(client):
    _create(client, role="admin")

    assert client.get("/users/role/reader@example.com").json() == {"role": "admin"}
    assert client.get("/users/role/ghost@example.com").json() == {"role": None, "message": "user not found"}


def test_profile_roundtrip(client):
    _create(client)

    response = client.patch("/users/profile/reader@example.com", json={"name": "Renamed", "image": "https://img/x.png"})
    assert response.status_code == 200

    profile = client.get("/users/profile/reader@example.com").json()
    assert profile["name"] == "Renamed"
    assert profile["image"] == "https://img/x.png"


def test_profile_missing_user(client):
    assert client.get("/users/profile/ghost@example.com").status_code == 404
    assert client.patch("/users/profile/ghost@example.com", json={"name": "x"}).status_code == 404


def test_profile_update_needs_fields(client):
    _create(client)
    assert client.patch("/users/profile/reader@example.com", json={}).status_code == 400


def test_update_role(client, db):
    user_id = _create(client).json()["insertedId"]

    response = client.patch(f"/users/{user_id}/role", json={"role": "librarian"})

    assert response.status_code == 200
    assert db["user"].find_one({"_id": ObjectId(user_id)})["role"] == "librarian"


def test_update_role_rejects_unknown_role(client, db):
    user_id = _create(client).json()["insertedId"]

    response = client.patch(f"/users/{user_id}/role", json={"role": "superuser"})

    assert response.status_code == 400
    assert db["user"].find_one({"_id": ObjectId(user_id)})["role"] == settings.default_role


def test_update_role_missing_user(client):
    assert client.patch(f"/users/{ObjectId()}/role", json={"role": "admin"}).status_code == 404
