"""Note service — private notes.

Learn: the list endpoint only returns the caller's own notes, while a
single note can be fetched by id by any authenticated user. That
asymmetry is long-standing client-visible behavior and is kept as is.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.jwt import Principal
from bookshelf.auth.ownership import ensure_owner
from bookshelf.db.models import Note
from bookshelf.db.repositories import NoteRepository
from bookshelf.errors import NotFound

logger = structlog.get_logger()


class NoteService:
    """Business logic for notes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notes = NoteRepository(db)

    async def create_note(
        self, principal: Principal, title: str, description: Optional[str] = None
    ) -> Note:
        try:
            note = await self.notes.create(
                created_by_id=principal.id, title=title, description=description
            )
        except IntegrityError:
            await self.db.rollback()
            raise NotFound("User not found.")
        await self.db.commit()
        logger.info("note.created", note_id=note.id, user_id=principal.id)
        return note

    async def list_notes(self, principal: Principal) -> list[Note]:
        return await self.notes.list_by_owner(principal.id)

    async def get_note(self, note_id: int) -> Note:
        note = await self.notes.find(note_id)
        if not note:
            raise NotFound("Note not found")
        return note

    async def delete_note(self, principal: Principal, note_id: int) -> None:
        note = await self.get_note(note_id)
        ensure_owner(
            principal,
            note.created_by_id,
            "Unauthorized - you can only delete notes you've created",
        )
        await self.notes.delete(note)
        await self.db.commit()
        logger.info("note.deleted", note_id=note_id, user_id=principal.id)
