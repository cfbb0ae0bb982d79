"""Pydantic schemas for books."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from bookshelf.db.models import MAX_ID
from bookshelf.schemas.base import ReadModel


class BookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    author: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    pages: Optional[int] = Field(None, ge=0, le=MAX_ID)
    image: Optional[str] = Field(None, max_length=2048)


class BookRead(ReadModel):
    id: int
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    pages: Optional[int] = None
    image: Optional[str] = None
    created_by_id: int
    created_at: Optional[datetime] = None
