"""Pydantic models for book ratings."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt


class RatingCreate(BaseModel):
    bookId: Optional[str] = None
    userEmail: Optional[str] = None
    # Older clients send the star value as a string.  Booleans stay
    # booleans so the service can reject them.
    rating: Optional[Union[StrictInt, StrictFloat, StrictBool, str]] = Field(None, examples=[4])


class RatingSubmitResult(BaseModel):
    acknowledged: bool = True
    updated: bool
    message: str


class RatingSummary(BaseModel):
    bookId: str
    # Mean rounded to one decimal and rendered as text, e.g. "4.0".
    average: Optional[str]
    count: int
    ratings: List[Dict[str, Any]]
