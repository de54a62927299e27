"""
Book endpoints for API v1.

Librarians create books, publish or unpublish them and edit their
metadata.  Deleting a book removes the orders placed for it as well.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from pymongo.database import Database

from bookstore_api.app.api.v1.errors import to_http_exception
from bookstore_api.app.core.db import get_database
from bookstore_api.app.core.errors import ServiceError
from bookstore_api.app.schemas.book import BookCreate, BookDeleteResult, BookStatusUpdate
from bookstore_api.app.schemas.common import InsertResult, UpdateResult
from bookstore_api.app.services.book_service import BookService

router = APIRouter()


@router.post("/books", response_model=InsertResult)
def create_book(book: BookCreate, db: Database = Depends(get_database)) -> InsertResult:
    try:
        return BookService(db).create_book(book)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/books", response_model=List[Dict[str, Any]])
def list_books(
    book_status: Optional[str] = Query(None, alias="status", description="Only books with this status"),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    try:
        return BookService(db).list_books(status=book_status)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/my-books", response_model=List[Dict[str, Any]])
def list_my_books(email: Optional[str] = Query(None), db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    """Books owned by the librarian ``email``, newest first."""
    try:
        return BookService(db).list_by_librarian(email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/books/{book_id}", response_model=Dict[str, Any])
def get_book(book_id: str, db: Database = Depends(get_database)) -> Dict[str, Any]:
    try:
        return BookService(db).get_book(book_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/books/edit/{book_id}", response_model=UpdateResult)
def edit_book(
    book_id: str,
    fields: Dict[str, Any] = Body(...),
    db: Database = Depends(get_database),
) -> UpdateResult:
    """Merge the posted fields into the book.  ``_id``/``id`` are ignored."""
    try:
        return BookService(db).edit_book(book_id, fields)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/books/{book_id}", response_model=UpdateResult)
def set_book_status(book_id: str, data: BookStatusUpdate, db: Database = Depends(get_database)) -> UpdateResult:
    """Publish (``published``) or unpublish (``draft``) a book."""
    try:
        return BookService(db).set_status(book_id, data.status)
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/books/{book_id}", response_model=BookDeleteResult)
def delete_book(book_id: str, db: Database = Depends(get_database)) -> BookDeleteResult:
    """Delete a book and every order placed for it."""
    try:
        return BookService(db).delete_book(book_id)
    except ServiceError as e:
        raise to_http_exception(e)
