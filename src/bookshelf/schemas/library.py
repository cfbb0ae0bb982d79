"""Pydantic schemas for libraries and their book membership."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from bookshelf.db.models import MAX_ID
from bookshelf.schemas.base import ReadModel
from bookshelf.schemas.book import BookRead


class LibraryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    books: list[Annotated[int, Field(ge=1, le=MAX_ID)]] = Field(default_factory=list)


class LibraryBookChange(BaseModel):
    """Body of the add/remove-book PUTs. ``bookId`` on the wire.

    Left unbounded here: the service checks the library and its owner
    before it looks at the book id.
    """
    book_id: Optional[int] = Field(None, alias="bookId")


class LibraryRead(ReadModel):
    id: int
    name: str
    created_by_id: int
    created_at: Optional[datetime] = None
    books: list[BookRead] = []
