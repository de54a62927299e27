"""
Business logic for book ratings.

Each user holds at most one rating per book.  Submitting again
overwrites the previous value; the write is a single upsert on the
(book, user) pair backed by a unique index.  Ratings written by older
clients may be stored as strings, so aggregation coerces every value
before averaging.
"""

import logging
import math
from typing import Any, Iterable, List, Optional, Union

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..core.db import RATINGS, serialize_many, store_errors, utcnow
from ..core.errors import InvalidInputError
from ..schemas.rating import RatingSubmitResult, RatingSummary

logger = logging.getLogger(__name__)

Number = Union[int, float]


def to_number(value: Any) -> Optional[Number]:
    """Coerce a stored or submitted rating to a number.

    Returns ``None`` for values that are not finite numbers.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def average(values: Iterable[Number]) -> Optional[str]:
    """Arithmetic mean rounded to one decimal place, as text."""
    values = list(values)
    if not values:
        return None
    return f"{sum(values) / len(values):.1f}"


class RatingService:
    def __init__(self, db: Database) -> None:
        self.ratings = db[RATINGS]

    def submit(self, book_id: Optional[str], user_email: Optional[str], rating: Any) -> RatingSubmitResult:
        if not book_id or not user_email or rating is None or rating == "":
            raise InvalidInputError("bookId, userEmail and rating are required")
        value = to_number(rating)
        if value is None:
            raise InvalidInputError("rating must be a number")
        now = utcnow()
        pair = {"bookId": book_id, "userEmail": user_email}
        update = {"$set": {"rating": value, "updatedAt": now}, "$setOnInsert": {"createdAt": now}}
        with store_errors("submit rating"):
            try:
                result = self.ratings.update_one(pair, update, upsert=True)
            except DuplicateKeyError:
                # Lost an insert race on the unique index; the pair exists now.
                result = self.ratings.update_one(pair, update)
        updated = result.upserted_id is None
        logger.info(
            "%s rating %s for book %s by %s",
            "Updated" if updated else "Added", value, book_id, user_email,
        )
        return RatingSubmitResult(
            updated=updated,
            message="Rating updated" if updated else "Rating added",
        )

    def aggregate(self, book_id: str) -> RatingSummary:
        with store_errors("aggregate ratings"):
            ratings = serialize_many(self.ratings.find({"bookId": book_id}))
        values: List[Number] = []
        for doc in ratings:
            value = to_number(doc.get("rating"))
            if value is None:
                logger.warning("Skipping non-numeric rating %r on %s", doc.get("rating"), doc.get("_id"))
                continue
            values.append(value)
        return RatingSummary(bookId=book_id, average=average(values), count=len(values), ratings=ratings)
