"""
Business logic for wishlists.

A wishlist entry pairs a user with a book.  The pair is unique (see
``core.db.init_db``), so adding a book twice is a no-op rather than a
duplicate.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..core.db import WISHLIST, serialize_many, store_errors, utcnow
from ..core.errors import InvalidInputError, NotFoundError
from ..schemas.common import DeleteResult, InsertResult

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, db: Database) -> None:
        self.wishlist = db[WISHLIST]

    def add(self, user_email: Optional[str], book_id: Optional[str]) -> InsertResult:
        if not user_email or not book_id:
            raise InvalidInputError("userEmail and bookId are required")
        pair = {"userEmail": user_email, "bookId": book_id}
        with store_errors("add wishlist entry"):
            try:
                result = self.wishlist.update_one(
                    pair,
                    {"$setOnInsert": {"createdAt": utcnow()}},
                    upsert=True,
                )
            except DuplicateKeyError:
                # A concurrent request inserted the same pair first.
                result = None
        if result is None or result.upserted_id is None:
            return InsertResult(insertedId=None, message="Book already in wishlist")
        logger.info("User %s wished for book %s", user_email, book_id)
        return InsertResult(insertedId=str(result.upserted_id))

    def list_for_user(self, user_email: Optional[str]) -> List[Dict[str, Any]]:
        if not user_email:
            raise InvalidInputError("userEmail query parameter is required")
        with store_errors("list wishlist"):
            cursor = self.wishlist.find({"userEmail": user_email}).sort("createdAt", DESCENDING)
            return serialize_many(cursor)

    def list_entries(self, book_id: Optional[str] = None, user_email: Optional[str] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if book_id:
            query["bookId"] = book_id
        if user_email:
            query["userEmail"] = user_email
        with store_errors("list wishlist"):
            return serialize_many(self.wishlist.find(query).sort("createdAt", DESCENDING))

    def remove(self, user_email: Optional[str], book_id: str) -> DeleteResult:
        if not user_email:
            raise InvalidInputError("userEmail query parameter is required")
        with store_errors("remove wishlist entry"):
            result = self.wishlist.delete_one({"userEmail": user_email, "bookId": book_id})
        if result.deleted_count == 0:
            raise NotFoundError("Wishlist item not found")
        logger.info("User %s removed book %s from wishlist", user_email, book_id)
        return DeleteResult(deletedCount=result.deleted_count)
