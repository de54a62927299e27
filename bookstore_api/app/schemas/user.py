"""
Pydantic models for user data.

Users are keyed by email; the identity provider used by the web client
guarantees that the email is verified before the profile is created.
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, enum.Enum):
    """Roles a user may hold."""

    BUYER = "buyer"
    LIBRARIAN = "librarian"
    ADMIN = "admin"


class UserCreate(BaseModel):
    """Schema for creating a user profile.

    ``email`` is optional at the schema level so that a missing value is
    reported by the service as a 400 with a readable message.  Unknown
    fields sent by the client are stored as they are.
    """

    email: Optional[str] = Field(None, examples=["reader@example.com"])
    name: Optional[str] = Field(None, examples=["Jane Reader"])
    image: Optional[str] = Field(None, description="Profile picture URL")
    role: Optional[str] = Field(None, description="Defaults to the configured default role")

    model_config = {"extra": "allow"}


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None


class RoleUpdate(BaseModel):
    role: Optional[str] = Field(None, examples=["librarian"])


class RoleRead(BaseModel):
    role: Optional[str]
    message: Optional[str] = None
