"""
User endpoints for API v1.

Profiles are created by the web client right after sign-in and are
addressed by email everywhere except for role assignment, which uses
the document id shown in the admin dashboard.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from bookstore_api.app.api.v1.errors import to_http_exception
from bookstore_api.app.core.db import get_database
from bookstore_api.app.core.errors import ServiceError
from bookstore_api.app.schemas.common import InsertResult, UpdateResult
from bookstore_api.app.schemas.user import ProfileUpdate, RoleRead, RoleUpdate, UserCreate
from bookstore_api.app.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=InsertResult)
def create_user(user: UserCreate, db: Database = Depends(get_database)) -> InsertResult:
    """Create a user profile.

    The role defaults to the configured default role.  Calling this
    again for an existing email is harmless and returns
    ``insertedId: null``.
    """
    try:
        return UserService(db).create_user(user)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[Dict[str, Any]])
def list_users(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    try:
        return UserService(db).list_users()
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/role/{email}", response_model=RoleRead, response_model_exclude_unset=True)
def get_user_role(email: str, db: Database = Depends(get_database)) -> RoleRead:
    """Return the role of a user, or ``{"role": null}`` if there is no such user."""
    try:
        return UserService(db).get_role(email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/profile/{email}", response_model=Dict[str, Any])
def get_profile(email: str, db: Database = Depends(get_database)) -> Dict[str, Any]:
    try:
        return UserService(db).get_profile(email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/profile/{email}", response_model=UpdateResult)
def update_profile(email: str, data: ProfileUpdate, db: Database = Depends(get_database)) -> UpdateResult:
    """Update the display name and/or profile picture."""
    try:
        return UserService(db).update_profile(email, data)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/{user_id}/role", response_model=UpdateResult)
def update_role(user_id: str, data: RoleUpdate, db: Database = Depends(get_database)) -> UpdateResult:
    """Assign one of ``buyer``, ``librarian`` or ``admin`` to a user."""
    try:
        return UserService(db).update_role(user_id, data.role)
    except ServiceError as e:
        raise to_http_exception(e)
