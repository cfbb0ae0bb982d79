"""Library service — each user's single library and its book membership.

Learn: the membership rules live in the schema, not in read-then-write
checks here:
- one library per owner   → unique index on libraries.created_by_id
- no duplicate membership → composite primary key on library_books
- only existing books     → foreign key library_books.book_id

The service writes, and if the database refuses it rolls back and
translates the IntegrityError into a Conflict with a precise message.
Two concurrent requests from the same user therefore cannot both win.

Every mutation checks existence first (404), then ownership (403).
"""

from typing import Iterable, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.jwt import Principal
from bookshelf.auth.ownership import ensure_owner
from bookshelf.db.models import MAX_ID, Library
from bookshelf.db.repositories import LibraryRepository, UserRepository
from bookshelf.errors import Conflict, NotFound, ValidationError

logger = structlog.get_logger()

NOT_OWNER = "Unauthorized - you can only update libraries you have created"


class LibraryService:
    """Business logic for libraries and the library↔book association."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.libraries = LibraryRepository(db)
        self.users = UserRepository(db)

    # ─── Create ──────────────────────────────────────────

    async def create_library(
        self, principal: Principal, name: str, book_ids: Iterable[int] = ()
    ) -> Library:
        """Create the caller's library, optionally seeded with books."""
        if await self.libraries.find_by_owner(principal.id):
            raise Conflict("You already have a library")

        try:
            library = await self.libraries.create(created_by_id=principal.id, name=name)
        except IntegrityError:
            await self.db.rollback()
            if not await self.users.find_by_id(principal.id):
                raise NotFound("User not found.")
            raise Conflict("You already have a library")
        library_id = library.id

        # Duplicates in the request would trip the composite key.
        unique_ids = list(dict.fromkeys(book_ids))
        try:
            await self.libraries.attach_books(library_id, unique_ids)
        except IntegrityError as e:
            await self.db.rollback()
            raise Conflict("One or more books do not exist", error=str(e.orig))

        await self.db.commit()
        logger.info(
            "library.created",
            library_id=library_id,
            user_id=principal.id,
            books=len(unique_ids),
        )
        return await self.get_library(library_id)

    # ─── Read ────────────────────────────────────────────

    async def list_libraries(self) -> list[Library]:
        return await self.libraries.list_all()

    async def get_library(self, library_id: int) -> Library:
        library = await self.libraries.find_by_id(library_id)
        if not library:
            raise NotFound("Library not found")
        return library

    async def _get_owned(self, principal: Principal, library_id: int) -> Library:
        library = await self.get_library(library_id)
        ensure_owner(principal, library.created_by_id, NOT_OWNER)
        return library

    # ─── Membership ──────────────────────────────────────

    async def add_book(
        self, principal: Principal, library_id: int, book_id: Optional[int]
    ) -> Library:
        await self._get_owned(principal, library_id)
        if not book_id:
            raise ValidationError("No bookId provided")
        if not 1 <= book_id <= MAX_ID:
            raise Conflict("Book not found")

        try:
            await self.libraries.add_book(library_id, book_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if await self.libraries.has_book(library_id, book_id):
                raise Conflict("The book is already in the library")
            raise Conflict("Book not found", error=str(e.orig))

        logger.info("library.book_added", library_id=library_id, book_id=book_id)
        return await self.get_library(library_id)

    async def remove_book(
        self, principal: Principal, library_id: int, book_id: Optional[int]
    ) -> Library:
        await self._get_owned(principal, library_id)
        if not book_id:
            raise ValidationError("No bookId provided")
        if not 1 <= book_id <= MAX_ID:
            raise Conflict("The book is not in the library")

        removed = await self.libraries.remove_book(library_id, book_id)
        if not removed:
            await self.db.rollback()
            raise Conflict("The book is not in the library")
        await self.db.commit()

        logger.info("library.book_removed", library_id=library_id, book_id=book_id)
        return await self.get_library(library_id)

    # ─── Delete ──────────────────────────────────────────

    async def delete_library(self, principal: Principal, library_id: int) -> None:
        library = await self.get_library(library_id)
        ensure_owner(
            principal,
            library.created_by_id,
            "Unauthorized - you can only delete libraries you have created",
        )
        await self.libraries.delete(library)
        await self.db.commit()
        logger.info("library.deleted", library_id=library_id, user_id=principal.id)
