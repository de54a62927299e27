"""Tests for the order state machine and order endpoints."""

import itertools

import pytest
from bson import ObjectId

from bookstore_api.app.core.errors import (
    ConflictError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
)
from bookstore_api.app.schemas.order import OrderCreate
from bookstore_api.app.services.order_service import OrderService

STATUSES = ["pending", "shipped", "delivered", "cancelled"]
ALLOWED = {("pending", "shipped"), ("shipped", "delivered")}
REJECTED = [pair for pair in itertools.product(STATUSES, STATUSES) if pair not in ALLOWED]


def _insert_order(db, status="pending", **fields):
    doc = {
        "bookId": str(ObjectId()),
        "buyerEmail": "buyer@example.com",
        "librarianEmail": "librarian@example.com",
        "status": status,
        "paymentStatus": "unpaid",
        **fields,
    }
    return str(db["order"].insert_one(doc).inserted_id)


@pytest.mark.parametrize("current,requested", sorted(ALLOWED))
def test_advance_allowed_transition_persists(db, current, requested):
    order_id = _insert_order(db, status=current)

    result = OrderService(db).advance(order_id, requested)

    assert result.modifiedCount == 1
    stored = db["order"].find_one({"_id": ObjectId(order_id)})
    assert stored["status"] == requested
    assert "updatedAt" in stored


@pytest.mark.parametrize("current,requested", REJECTED)
def test_advance_rejected_transition_leaves_order_unchanged(db, current, requested):
    order_id = _insert_order(db, status=current)
    before = db["order"].find_one({"_id": ObjectId(order_id)})

    with pytest.raises(InvalidTransitionError):
        OrderService(db).advance(order_id, requested)

    assert db["order"].find_one({"_id": ObjectId(order_id)}) == before


def test_advance_unknown_status_is_rejected(db):
    order_id = _insert_order(db)
    with pytest.raises(InvalidTransitionError):
        OrderService(db).advance(order_id, "lost")


def test_advance_missing_order(db):
    with pytest.raises(NotFoundError):
        OrderService(db).advance(str(ObjectId()), "shipped")


def test_advance_requires_status(db):
    with pytest.raises(InvalidInputError):
        OrderService(db).advance(_insert_order(db), None)


@pytest.mark.parametrize("current", ["pending", "shipped", "cancelled"])
def test_cancel_sets_status_and_payment_status(db, current):
    order_id = _insert_order(db, status=current)

    OrderService(db).cancel(order_id)

    stored = db["order"].find_one({"_id": ObjectId(order_id)})
    assert stored["status"] == "cancelled"
    assert stored["paymentStatus"] == "cancelled"


def test_cancel_delivered_order_conflicts(db):
    order_id = _insert_order(db, status="delivered")

    with pytest.raises(ConflictError):
        OrderService(db).cancel(order_id)

    stored = db["order"].find_one({"_id": ObjectId(order_id)})
    assert stored["status"] == "delivered"
    assert stored["paymentStatus"] == "unpaid"


def test_cancel_missing_order(db):
    with pytest.raises(NotFoundError):
        OrderService(db).cancel(str(ObjectId()))


def test_create_fills_librarian_and_title_from_book(db):
    book_id = db["book"].insert_one(
        {"title": "Dune", "librarianEmail": "librarian@example.com"}
    ).inserted_id

    result = OrderService(db).create(
        OrderCreate(bookId=str(book_id), buyerEmail="buyer@example.com", quantity=2)
    )

    order = db["order"].find_one({"_id": ObjectId(result.insertedId)})
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "unpaid"
    assert order["librarianEmail"] == "librarian@example.com"
    assert order["bookTitle"] == "Dune"
    assert order["quantity"] == 2


def test_create_for_unknown_book_is_accepted(db):
    result = OrderService(db).create(OrderCreate(bookId="not-an-id", buyerEmail="buyer@example.com"))
    order = db["order"].find_one({"_id": ObjectId(result.insertedId)})
    assert "librarianEmail" not in order


def test_create_requires_book_and_buyer(db):
    with pytest.raises(InvalidInputError):
        OrderService(db).create(OrderCreate(bookId=str(ObjectId())))


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def test_post_order(client, db):
    response = client.post(
        "/orders",
        json={"bookId": str(ObjectId()), "buyerEmail": "buyer@example.com", "phone": "555-0100"},
    )
    assert response.status_code == 200
    order = db["order"].find_one({"_id": ObjectId(response.json()["insertedId"])})
    assert order["phone"] == "555-0100"


def test_post_order_missing_fields(client):
    response = client.post("/orders", json={"buyerEmail": "buyer@example.com"})
    assert response.status_code == 400


def test_my_orders_newest_first(client, db, timestamps):
    old = _insert_order(db, createdAt=timestamps[0])
    new = _insert_order(db, createdAt=timestamps[1])
    _insert_order(db, buyerEmail="someone@example.com", createdAt=timestamps[2])

    response = client.get("/my-orders", params={"email": "buyer@example.com"})

    assert response.status_code == 200
    assert [o["_id"] for o in response.json()] == [new, old]


def test_my_orders_requires_email(client):
    assert client.get("/my-orders").status_code == 400


def test_librarian_orders_newest_first(client, db, timestamps):
    old = _insert_order(db, createdAt=timestamps[0])
    new = _insert_order(db, createdAt=timestamps[3])
    _insert_order(db, librarianEmail="other@example.com", createdAt=timestamps[4])

    response = client.get("/orders/librarian/librarian@example.com")

    assert [o["_id"] for o in response.json()] == [new, old]


def test_patch_status_advances(client, db):
    order_id = _insert_order(db)
    response = client.patch(f"/orders/status/{order_id}", json={"status": "shipped"})
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 1


def test_patch_status_skip_is_400(client, db):
    order_id = _insert_order(db)
    response = client.patch(f"/orders/status/{order_id}", json={"status": "delivered"})
    assert response.status_code == 400
    assert db["order"].find_one({"_id": ObjectId(order_id)})["status"] == "pending"


def test_patch_status_missing_order_is_404(client):
    response = client.patch(f"/orders/status/{ObjectId()}", json={"status": "shipped"})
    assert response.status_code == 404


def test_patch_status_malformed_id_is_400(client):
    response = client.patch("/orders/status/abc", json={"status": "shipped"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid ID format"


def test_patch_cancel(client, db):
    delivered = _insert_order(db, status="delivered")
    pending = _insert_order(db)

    assert client.patch(f"/orders/cancel/{delivered}").status_code == 400
    assert client.patch(f"/orders/cancel/{pending}").status_code == 200
    assert client.patch(f"/orders/cancel/{ObjectId()}").status_code == 404
