"""Pydantic schemas for signup, login and the current user.

Learn: request fields are optional at the schema level on purpose — the
account service reports missing fields with its own messages
("Provide email, password and name") instead of a generic 400.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from bookshelf.schemas.base import ReadModel
from bookshelf.schemas.book import BookRead
from bookshelf.schemas.library import LibraryRead


class SignupRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(ReadModel):
    auth_token: str
    id: int


class UserRead(ReadModel):
    """Public view of a user. The password hash is never included."""
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None


class UserProfile(UserRead):
    library: Optional[LibraryRead] = None
    books: list[BookRead] = []
