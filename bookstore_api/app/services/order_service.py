"""
Business logic for orders.

Orders follow a small state machine: ``pending -> shipped ->
delivered``, with ``cancelled`` reachable from every state except
``delivered``.  Librarians advance an order one step at a time; buyers may cancel it
until it has been delivered.  Every status write is conditional on the
status the service observed, so two concurrent requests cannot both
move the same order.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.database import Database

from ..core.db import BOOKS, ORDERS, parse_object_id, serialize_many, store_errors, utcnow
from ..core.errors import ConflictError, InvalidInputError, InvalidTransitionError, NotFoundError
from ..schemas.common import InsertResult, UpdateResult
from ..schemas.order import OrderCreate, OrderStatus

logger = logging.getLogger(__name__)

# The only forward moves an order may make.
TRANSITIONS = {
    OrderStatus.PENDING.value: OrderStatus.SHIPPED.value,
    OrderStatus.SHIPPED.value: OrderStatus.DELIVERED.value,
}

UNPAID = "unpaid"


def can_advance(current: Optional[str], requested: Optional[str]) -> bool:
    return current in TRANSITIONS and TRANSITIONS[current] == requested


class OrderService:
    """Service for placing, listing and moving orders."""

    def __init__(self, db: Database) -> None:
        self.orders = db[ORDERS]
        self.books = db[BOOKS]

    def create(self, data: OrderCreate) -> InsertResult:
        """Place an order in ``pending`` state.

        When the referenced book exists, a missing ``librarianEmail`` or
        ``bookTitle`` is filled in from it.  A book that cannot be found
        does not block the order.
        """
        if not data.bookId or not data.buyerEmail:
            raise InvalidInputError("bookId and buyerEmail are required")
        doc: Dict[str, Any] = data.model_dump(exclude_none=True)
        doc.pop("_id", None)
        doc.pop("id", None)
        with store_errors("create order"):
            if not data.librarianEmail or not data.bookTitle:
                book = self._find_book(data.bookId)
                if book:
                    doc.setdefault("librarianEmail", book.get("librarianEmail"))
                    doc.setdefault("bookTitle", book.get("title"))
            doc.update(
                status=OrderStatus.PENDING.value,
                paymentStatus=UNPAID,
                createdAt=utcnow(),
            )
            result = self.orders.insert_one(doc)
        logger.info("Order %s placed by %s for book %s", result.inserted_id, data.buyerEmail, data.bookId)
        return InsertResult(insertedId=str(result.inserted_id))

    def _find_book(self, book_id: str) -> Optional[Dict[str, Any]]:
        try:
            oid = ObjectId(book_id)
        except (InvalidId, TypeError):
            return None
        return self.books.find_one({"_id": oid}, {"librarianEmail": 1, "title": 1})

    def list_by_buyer(self, email: Optional[str]) -> List[Dict[str, Any]]:
        if not email:
            raise InvalidInputError("email query parameter is required")
        with store_errors("list buyer orders"):
            cursor = self.orders.find({"buyerEmail": email}).sort("createdAt", DESCENDING)
            return serialize_many(cursor)

    def list_by_librarian(self, email: str) -> List[Dict[str, Any]]:
        if not email:
            raise InvalidInputError("email is required")
        with store_errors("list librarian orders"):
            cursor = self.orders.find({"librarianEmail": email}).sort("createdAt", DESCENDING)
            return serialize_many(cursor)

    def advance(self, order_id: str, requested: Optional[str]) -> UpdateResult:
        """Move an order one step forward.

        Only ``pending -> shipped`` and ``shipped -> delivered`` are
        accepted.  Anything else, including re-applying the current
        status, raises ``InvalidTransitionError`` and leaves the order
        unchanged.
        """
        if not requested:
            raise InvalidInputError("status is required")
        oid = parse_object_id(order_id)
        with store_errors("advance order"):
            order = self.orders.find_one({"_id": oid}, {"status": 1})
            if not order:
                raise NotFoundError(f"Order {order_id} not found")
            current = order.get("status")
            if not can_advance(current, requested):
                logger.warning("Rejected order %s transition %s -> %s", order_id, current, requested)
                raise InvalidTransitionError(f"Cannot change order status from {current} to {requested}")
            result = self.orders.update_one(
                {"_id": oid, "status": current},
                {"$set": {"status": requested, "updatedAt": utcnow()}},
            )
        if result.modified_count == 0:
            # Someone else moved the order between our read and write.
            raise InvalidTransitionError(f"Order {order_id} is no longer {current}")
        logger.info("Order %s advanced from %s to %s", order_id, current, requested)
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)

    def cancel(self, order_id: str) -> UpdateResult:
        """Cancel an order that has not been delivered.

        Sets both ``status`` and ``paymentStatus`` to ``cancelled``.
        """
        oid = parse_object_id(order_id)
        cancelled = OrderStatus.CANCELLED.value
        with store_errors("cancel order"):
            result = self.orders.update_one(
                {"_id": oid, "status": {"$ne": OrderStatus.DELIVERED.value}},
                {"$set": {"status": cancelled, "paymentStatus": cancelled, "updatedAt": utcnow()}},
            )
            if result.matched_count == 0:
                if self.orders.find_one({"_id": oid}, {"_id": 1}) is None:
                    raise NotFoundError(f"Order {order_id} not found")
                logger.warning("Rejected cancellation of delivered order %s", order_id)
                raise ConflictError("Delivered orders cannot be cancelled")
        logger.info("Order %s cancelled", order_id)
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)
