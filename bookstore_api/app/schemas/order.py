"""
Pydantic models for orders.

An order moves ``pending -> shipped -> delivered``.  It may be
cancelled at any point before delivery; ``cancelled`` and
``delivered`` are terminal.
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderCreate(BaseModel):
    """Schema for placing an order.

    Delivery details (address, phone, quantity, price ...) are stored as
    sent.  ``librarianEmail`` and ``bookTitle`` are copied from the book
    when omitted.
    """

    bookId: Optional[str] = None
    buyerEmail: Optional[str] = None
    librarianEmail: Optional[str] = None
    bookTitle: Optional[str] = None

    model_config = {"extra": "allow"}


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, examples=["shipped"])
