"""
MongoDB integration.

This module owns the lifecycle helpers for the document store: creating
the process-wide ``MongoClient``, creating indexes at startup
(``init_db``), the FastAPI dependency that hands the database to
endpoints (``get_database``) and small helpers shared by the services
for ObjectId parsing, timestamping and JSON serialisation.

The client itself is not a module-level singleton.  ``create_app``
builds one (or receives one, e.g. a mongomock client in tests) and
stores it on ``app.state``; endpoints reach it through the request.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from .config import settings
from .errors import InvalidInputError, StoreError

logger = logging.getLogger(__name__)

USERS = "user"
BOOKS = "book"
WISHLIST = "wishlist"
ORDERS = "order"
RATINGS = "rating"


def create_client(url: Optional[str] = None) -> MongoClient:
    """Create the MongoDB client used for the lifetime of the process.

    The Stable API version 1 is requested in strict mode so that the
    server rejects commands outside the versioned API.
    """
    return MongoClient(
        url or settings.mongo_url,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        tz_aware=True,
    )


def init_db(db: Database) -> None:
    """Create the indexes the services rely on.

    ``create_index`` is idempotent, so this runs on every startup.  The
    unique indexes turn the wishlist and rating upserts into atomic
    operations: two concurrent submissions for the same pair resolve to
    a single document.
    """
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[WISHLIST].create_index([("userEmail", ASCENDING), ("bookId", ASCENDING)], unique=True)
    db[RATINGS].create_index([("bookId", ASCENDING), ("userEmail", ASCENDING)], unique=True)
    db[ORDERS].create_index([("bookId", ASCENDING)])
    db[ORDERS].create_index([("buyerEmail", ASCENDING)])
    db[ORDERS].create_index([("librarianEmail", ASCENDING)])
    db[BOOKS].create_index([("librarianEmail", ASCENDING)])
    logger.info("Indexes ensured on database %s", db.name)


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the database bound to the application."""
    return request.app.state.db


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate driver failures into service errors.

    Payload values BSON cannot encode (integers wider than 8 bytes,
    unsupported types) become ``InvalidInputError``.  Anything else the
    driver raises is logged here and surfaces as ``StoreError``.
    """
    try:
        yield
    except (OverflowError, InvalidDocument) as e:
        logger.info("Rejected document while trying to %s: %s", action, e)
        raise InvalidInputError(f"Unsupported value in document: {e}") from e
    except PyMongoError as e:
        logger.error("Failed to %s: %s", action, e)
        raise StoreError() from e


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidInputError("Invalid ID format")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Make a document JSON friendly.

    ``ObjectId`` values become strings and datetimes ISO-8601 strings.
    The ``_id`` key is preserved because the web client addresses
    documents by it.
    """
    if doc is None:
        return None
    out: Dict[str, Any] = {}
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            out[key] = str(value)
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


def serialize_many(docs) -> List[Dict[str, Any]]:
    return [serialize(d) for d in docs]
