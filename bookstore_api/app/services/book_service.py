"""
Business logic for books.

Books are created and edited by librarians.  Deleting a book also
deletes every order placed for it; when ``MONGO_TRANSACTIONS`` is
enabled both deletes run in one multi-document transaction, otherwise
they run one after the other and a failure in between leaves orphaned
orders behind (logged).
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.client_session import ClientSession
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..core.config import settings
from ..core.db import BOOKS, ORDERS, parse_object_id, serialize, serialize_many, store_errors, utcnow
from ..core.errors import InvalidInputError, NotFoundError
from ..schemas.book import BookCreate, BookDeleteResult, BookStatus
from ..schemas.common import InsertResult, UpdateResult

logger = logging.getLogger(__name__)

BOOK_STATUSES = {s.value for s in BookStatus}

# Fields a merge-update may never touch.
PROTECTED_FIELDS = {"_id", "id"}


def _check_status(status: Optional[str]) -> str:
    if status not in BOOK_STATUSES:
        raise InvalidInputError(
            f"Invalid status '{status}'. Allowed: {', '.join(sorted(BOOK_STATUSES))}"
        )
    return status


class BookService:
    """Service for the book catalogue."""

    def __init__(self, db: Database, use_transactions: Optional[bool] = None) -> None:
        self.db = db
        self.books = db[BOOKS]
        self.orders = db[ORDERS]
        self.use_transactions = settings.mongo_transactions if use_transactions is None else use_transactions

    def create_book(self, data: BookCreate) -> InsertResult:
        if not data.title:
            raise InvalidInputError("title is required")
        doc: Dict[str, Any] = data.model_dump(exclude_none=True)
        doc.pop("_id", None)
        doc.pop("id", None)
        doc["status"] = _check_status(doc.get("status") or BookStatus.PUBLISHED.value)
        doc["createdAt"] = utcnow()
        with store_errors("create book"):
            result = self.books.insert_one(doc)
        logger.info("Book %s created by %s", result.inserted_id, doc.get("librarianEmail"))
        return InsertResult(insertedId=str(result.inserted_id))

    def list_books(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if status is not None:
            query["status"] = _check_status(status)
        with store_errors("list books"):
            return serialize_many(self.books.find(query).sort("createdAt", DESCENDING))

    def get_book(self, book_id: str) -> Dict[str, Any]:
        oid = parse_object_id(book_id)
        with store_errors("fetch book"):
            book = self.books.find_one({"_id": oid})
        if not book:
            raise NotFoundError(f"Book {book_id} not found")
        return serialize(book)

    def set_status(self, book_id: str, status: Optional[str]) -> UpdateResult:
        """Publish or unpublish a book."""
        _check_status(status)
        oid = parse_object_id(book_id)
        with store_errors("update book status"):
            result = self.books.update_one(
                {"_id": oid},
                {"$set": {"status": status, "updatedAt": utcnow()}},
            )
        if result.matched_count == 0:
            raise NotFoundError(f"Book {book_id} not found")
        logger.info("Book %s status set to %s", book_id, status)
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)

    def edit_book(self, book_id: str, fields: Dict[str, Any]) -> UpdateResult:
        """Merge the given fields into the book document.

        Identifier fields in the payload are ignored.  ``status`` is
        still validated when present.
        """
        oid = parse_object_id(book_id)
        updates = {k: v for k, v in fields.items() if k not in PROTECTED_FIELDS}
        if not updates:
            raise InvalidInputError("Nothing to update")
        if "status" in updates:
            _check_status(updates["status"])
        updates["updatedAt"] = utcnow()
        with store_errors("edit book"):
            result = self.books.update_one({"_id": oid}, {"$set": updates})
        if result.matched_count == 0:
            raise NotFoundError(f"Book {book_id} not found")
        logger.info("Book %s edited (%s)", book_id, ", ".join(sorted(updates)))
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)

    def list_by_librarian(self, email: Optional[str]) -> List[Dict[str, Any]]:
        if not email:
            raise InvalidInputError("email query parameter is required")
        with store_errors("list librarian books"):
            cursor = self.books.find({"librarianEmail": email}).sort("createdAt", DESCENDING)
            return serialize_many(cursor)

    def delete_book(self, book_id: str) -> BookDeleteResult:
        """Delete a book and every order that references it.

        Raises ``NotFoundError`` without touching the orders when no
        book matched.  Returns the number of orders removed.
        """
        oid = parse_object_id(book_id)
        if self.use_transactions:
            with store_errors("delete book"):
                with self.db.client.start_session() as session:
                    return session.with_transaction(
                        lambda s: self._delete_with_orders(oid, book_id, s)
                    )
        with store_errors("delete book"):
            return self._delete_with_orders(oid, book_id)

    def _delete_with_orders(
        self, oid, book_id: str, session: Optional[ClientSession] = None
    ) -> BookDeleteResult:
        # Standalone deployments run without a session.
        kwargs = {"session": session} if session is not None else {}
        result = self.books.delete_one({"_id": oid}, **kwargs)
        if result.deleted_count == 0:
            raise NotFoundError(f"Book {book_id} not found")
        try:
            orders = self.orders.delete_many({"bookId": book_id}, **kwargs)
        except PyMongoError:
            if session is None:
                logger.warning("Book %s deleted but its orders were not; they are now orphaned", book_id)
            raise
        logger.info("Book %s deleted with %s order(s)", book_id, orders.deleted_count)
        return BookDeleteResult(deletedCount=result.deleted_count, deletedOrders=orders.deleted_count)
