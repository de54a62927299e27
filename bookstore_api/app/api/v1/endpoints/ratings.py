"""Rating endpoints for API v1."""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from bookstore_api.app.api.v1.errors import to_http_exception
from bookstore_api.app.core.db import get_database
from bookstore_api.app.core.errors import ServiceError
from bookstore_api.app.schemas.rating import RatingCreate, RatingSubmitResult, RatingSummary
from bookstore_api.app.services.rating_service import RatingService

router = APIRouter()


@router.post("", response_model=RatingSubmitResult)
def submit_rating(data: RatingCreate, db: Database = Depends(get_database)) -> RatingSubmitResult:
    """Rate a book.  A second rating by the same user replaces the first."""
    try:
        return RatingService(db).submit(data.bookId, data.userEmail, data.rating)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{book_id}", response_model=RatingSummary)
def get_ratings(book_id: str, db: Database = Depends(get_database)) -> RatingSummary:
    """Average rating (one decimal, ``null`` when unrated) and the raw ratings."""
    try:
        return RatingService(db).aggregate(book_id)
    except ServiceError as e:
        raise to_http_exception(e)
