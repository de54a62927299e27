"""Response shapes shared by every domain."""

from typing import Optional

from pydantic import BaseModel


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: Optional[str] = None
    message: Optional[str] = None


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deletedCount: int
