"""
Pydantic models for books.

Book metadata is free-form (title, author, price, cover image ...).
Only ``title``, ``librarianEmail`` and ``status`` carry meaning for the
API.  ``status`` controls whether the book is visible in the public
catalogue.
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field

from .common import DeleteResult


class BookStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class BookCreate(BaseModel):
    title: Optional[str] = Field(None, examples=["The Left Hand of Darkness"])
    librarianEmail: Optional[str] = Field(None, description="Email of the librarian who owns the book")
    status: Optional[str] = Field(None, description="draft or published; defaults to published")

    model_config = {"extra": "allow"}


class BookStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, examples=["draft"])


class BookDeleteResult(DeleteResult):
    """Result of deleting a book together with the orders placed for it."""

    deletedOrders: int = 0
