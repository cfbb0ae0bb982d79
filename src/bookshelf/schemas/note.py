"""Pydantic schemas for notes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from bookshelf.schemas.base import ReadModel


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None


class NoteRead(ReadModel):
    id: int
    title: str
    description: Optional[str] = None
    created_by_id: int
    created_at: Optional[datetime] = None
