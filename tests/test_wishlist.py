"""Tests for wishlist endpoints and the bearer-token guard."""

from bookstore_api.app.core.security import create_access_token, decode_access_token


def test_add_requires_token(client):
    response = client.post("/wishlist", json={"bookId": "book-1"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized access"


def test_add_rejects_bad_token(client):
    response = client.post("/wishlist", json={"bookId": "book-1"}, headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_expired_token_is_invalid(client):
    token = create_access_token({"email": "reader@example.com"}, expires_delta=-60)
    response = client.get("/wishlist", params={"userEmail": "reader@example.com"},
                          headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_tampered_token_is_invalid():
    token = create_access_token({"email": "reader@example.com"})
    header, payload, signature = token.split(".")
    forged = create_access_token({"email": "admin@example.com"}).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token(token)["email"] == "reader@example.com"


def test_add_defaults_to_caller_and_is_idempotent(client, db, auth_headers):
    headers = auth_headers("reader@example.com")

    first = client.post("/wishlist", json={"bookId": "book-1"}, headers=headers)
    second = client.post("/wishlist", json={"bookId": "book-1"}, headers=headers)

    assert first.status_code == 200
    assert first.json()["insertedId"]
    assert second.json()["insertedId"] is None
    assert db["wishlist"].count_documents({"userEmail": "reader@example.com", "bookId": "book-1"}) == 1


def test_add_requires_book_id(client, auth_headers):
    assert client.post("/wishlist", json={}, headers=auth_headers()).status_code == 400


def test_list_own_wishlist(client, auth_headers):
    headers = auth_headers("reader@example.com")
    client.post("/wishlist", json={"bookId": "book-1"}, headers=headers)
    client.post("/wishlist", json={"bookId": "book-2"}, headers=headers)

    response = client.get("/wishlist", params={"userEmail": "reader@example.com"}, headers=headers)

    assert response.status_code == 200
    assert {e["bookId"] for e in response.json()} == {"book-1", "book-2"}


def test_list_requires_user_email(client, auth_headers):
    assert client.get("/wishlist", headers=auth_headers()).status_code == 400


def test_list_other_users_wishlist_is_forbidden(client, auth_headers):
    response = client.get("/wishlist", params={"userEmail": "other@example.com"}, headers=auth_headers())
    assert response.status_code == 403


def test_add_to_other_users_wishlist_is_forbidden(client, db, auth_headers):
    response = client.post(
        "/wishlist",
        json={"bookId": "book-1", "userEmail": "victim@example.com"},
        headers=auth_headers("reader@example.com"),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden access"
    assert db["wishlist"].count_documents({}) == 0


def test_add_with_own_email_in_body(client, db, auth_headers):
    response = client.post(
        "/wishlist",
        json={"bookId": "book-1", "userEmail": "reader@example.com"},
        headers=auth_headers("reader@example.com"),
    )

    assert response.status_code == 200
    assert db["wishlist"].count_documents({"userEmail": "reader@example.com"}) == 1


def test_find_entries_by_book(client, auth_headers):
    client.post("/wishlist", json={"bookId": "book-1"}, headers=auth_headers("a@example.com"))
    client.post("/wishlist", json={"bookId": "book-1"}, headers=auth_headers("b@example.com"))
    client.post("/wishlist", json={"bookId": "book-2"}, headers=auth_headers("a@example.com"))

    assert len(client.get("/wishlist/id").json()) == 3
    assert {e["userEmail"] for e in client.get("/wishlist/id", params={"bookId": "book-1"}).json()} == {
        "a@example.com",
        "b@example.com",
    }


def test_remove_entry(client, db, auth_headers):
    client.post("/wishlist", json={"bookId": "book-1"}, headers=auth_headers())

    response = client.delete("/wishlist/book-1", params={"userEmail": "reader@example.com"})

    assert response.status_code == 200
    assert response.json()["deletedCount"] == 1
    assert db["wishlist"].count_documents({}) == 0
    assert client.delete("/wishlist/book-1", params={"userEmail": "reader@example.com"}).status_code == 404
    assert client.delete("/wishlist/book-1").status_code == 400


def test_liveness(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Server is running..."
