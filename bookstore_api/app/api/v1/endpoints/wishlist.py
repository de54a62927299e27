"""
Wishlist endpoints for API v1.

Adding to and reading one's own wishlist requires a bearer token, and
a caller can only touch their own list.  The
catalogue pages use ``GET /wishlist/id`` to find out who wished for a
book, and the wishlist page removes entries by book id.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.database import Database

from bookstore_api.app.api.v1.errors import to_http_exception
from bookstore_api.app.core.db import get_database
from bookstore_api.app.core.errors import ServiceError
from bookstore_api.app.core.security import get_current_email
from bookstore_api.app.schemas.common import DeleteResult, InsertResult
from bookstore_api.app.schemas.wishlist import WishlistCreate
from bookstore_api.app.services.wishlist_service import WishlistService

router = APIRouter()


@router.post("", response_model=InsertResult)
def add_to_wishlist(
    data: WishlistCreate,
    db: Database = Depends(get_database),
    current_email: str = Depends(get_current_email),
) -> InsertResult:
    """Add a book to the caller's wishlist.

    ``userEmail`` may be omitted; when given it must be the caller's.
    """
    if data.userEmail and data.userEmail != current_email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    try:
        return WishlistService(db).add(current_email, data.bookId)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[Dict[str, Any]])
def get_wishlist(
    userEmail: Optional[str] = Query(None),
    db: Database = Depends(get_database),
    current_email: str = Depends(get_current_email),
) -> List[Dict[str, Any]]:
    """List the wishlist of ``userEmail``.

    Callers may only read their own wishlist.
    """
    if userEmail and userEmail != current_email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    try:
        return WishlistService(db).list_for_user(userEmail)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/id", response_model=List[Dict[str, Any]])
def find_wishlist_entries(
    bookId: Optional[str] = Query(None),
    userEmail: Optional[str] = Query(None),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    try:
        return WishlistService(db).list_entries(book_id=bookId, user_email=userEmail)
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{book_id}", response_model=DeleteResult)
def remove_from_wishlist(
    book_id: str,
    userEmail: Optional[str] = Query(None),
    db: Database = Depends(get_database),
) -> DeleteResult:
    try:
        return WishlistService(db).remove(userEmail, book_id)
    except ServiceError as e:
        raise to_http_exception(e)
