"""
Business logic for users.

Profiles are keyed by email, which is unique in the ``user``
collection.  Roles come from a fixed set (see ``UserRole``); new users
receive the configured default role.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..core.config import settings
from ..core.db import USERS, parse_object_id, serialize, serialize_many, store_errors, utcnow
from ..core.errors import InvalidInputError, NotFoundError
from ..schemas.common import InsertResult, UpdateResult
from ..schemas.user import ProfileUpdate, RoleRead, UserCreate, UserRole

logger = logging.getLogger(__name__)

ALLOWED_ROLES = {role.value for role in UserRole}


def _check_role(role: str) -> str:
    if role not in ALLOWED_ROLES:
        raise InvalidInputError(
            f"Invalid role '{role}'. Allowed roles: {', '.join(sorted(ALLOWED_ROLES))}"
        )
    return role


class UserService:
    """Service for user profiles and roles."""

    def __init__(self, db: Database) -> None:
        self.users = db[USERS]

    def create_user(self, data: UserCreate) -> InsertResult:
        """Create a user profile.

        The role defaults to ``settings.default_role`` when absent.  A
        profile that already exists for the email is left untouched and
        reported with ``insertedId=None``; the web client calls this on
        every sign-in.
        """
        if not data.email:
            raise InvalidInputError("email is required")
        doc: Dict[str, Any] = data.model_dump(exclude_none=True)
        doc.pop("_id", None)
        doc.pop("id", None)
        doc["role"] = _check_role(doc.get("role") or settings.default_role)
        doc["createdAt"] = utcnow()
        with store_errors("create user"):
            if self.users.find_one({"email": data.email}, {"_id": 1}):
                logger.info("User %s already exists", data.email)
                return InsertResult(insertedId=None, message="User already exists")
            try:
                result = self.users.insert_one(doc)
            except DuplicateKeyError:
                # Concurrent sign-in created the profile after our lookup.
                logger.info("User %s already exists", data.email)
                return InsertResult(insertedId=None, message="User already exists")
        logger.info("Created user %s with role %s", data.email, doc["role"])
        return InsertResult(insertedId=str(result.inserted_id))

    def list_users(self) -> List[Dict[str, Any]]:
        with store_errors("list users"):
            return serialize_many(self.users.find({}))

    def get_role(self, email: str) -> RoleRead:
        with store_errors("fetch user role"):
            user = self.users.find_one({"email": email}, {"role": 1})
        if not user:
            return RoleRead(role=None, message="user not found")
        return RoleRead(role=user.get("role"))

    def get_profile(self, email: str) -> Dict[str, Any]:
        with store_errors("fetch user profile"):
            user = self.users.find_one({"email": email})
        if not user:
            raise NotFoundError(f"User {email} not found")
        return serialize(user)

    def update_profile(self, email: str, data: ProfileUpdate) -> UpdateResult:
        updates = data.model_dump(exclude_none=True)
        if not updates:
            raise InvalidInputError("Nothing to update: provide name or image")
        updates["updatedAt"] = utcnow()
        with store_errors("update user profile"):
            result = self.users.update_one({"email": email}, {"$set": updates})
        if result.matched_count == 0:
            raise NotFoundError(f"User {email} not found")
        logger.info("Updated profile of %s", email)
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)

    def update_role(self, user_id: str, role: Optional[str]) -> UpdateResult:
        if not role:
            raise InvalidInputError("role is required")
        _check_role(role)
        oid = parse_object_id(user_id)
        with store_errors("update user role"):
            result = self.users.update_one(
                {"_id": oid},
                {"$set": {"role": role, "updatedAt": utcnow()}},
            )
        if result.matched_count == 0:
            raise NotFoundError(f"User {user_id} not found")
        logger.info("Assigned role %s to user %s", role, user_id)
        return UpdateResult(matchedCount=result.matched_count, modifiedCount=result.modified_count)
