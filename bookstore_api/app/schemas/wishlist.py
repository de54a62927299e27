"""Pydantic models for wishlist entries."""

from typing import Optional

from pydantic import BaseModel, Field


class WishlistCreate(BaseModel):
    bookId: Optional[str] = Field(None, description="Identifier of the wished-for book")
    # Falls back to the authenticated caller when omitted.
    userEmail: Optional[str] = None
