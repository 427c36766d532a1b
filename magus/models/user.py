from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCredentials(BaseModel):
    """
    Email/password pair posted by the login form and the user admin screen.

    Both fields are optional at the schema level so that a missing field is
    reported with the same message as a blank one.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class User(BaseModel):
    """
    Public view of a stored user. Never carries the password hash.
    """
    model_config = ConfigDict(populate_by_name=True)

    email: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class UserRecord(User):
    """
    A user item as held in the credential store.
    """
    password_hash: Optional[str] = Field(default=None, alias="passwordHash")

    def to_public(self) -> User:
        return User(email=self.email, created_at=self.created_at, updated_at=self.updated_at)


class UserListResponse(BaseModel):
    users: List[User]


class UserMutationResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: Optional[User] = None
