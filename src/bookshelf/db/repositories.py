"""Repositories — the persistence boundary the services talk to.

Learn: each repository wraps the request's AsyncSession and exposes the
handful of queries its service needs. Repositories flush but never
commit; the service owning the unit of work decides when to commit or
roll back. IntegrityError from a flush is left to the caller, which is
where the uniqueness rules get their domain-specific messages.
"""

from typing import Iterable, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookshelf.db.models import Book, Library, Note, User, library_books


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_id(self, user_id: int, with_resources: bool = False) -> Optional[User]:
        q = select(User).where(User.id == user_id)
        if with_resources:
            q = q.options(
                selectinload(User.library).selectinload(Library.books),
                selectinload(User.books),
            ).execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def create(self, email: str, name: str, password_hash: str) -> User:
        user = User(email=email, name=name, password_hash=password_hash)
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user


class BookRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, created_by_id: int, **fields) -> Book:
        book = Book(created_by_id=created_by_id, **fields)
        self.db.add(book)
        await self.db.flush()
        await self.db.refresh(book)
        return book

    async def find(self, book_id: int) -> Optional[Book]:
        return await self.db.get(Book, book_id)

    async def list_all(self) -> list[Book]:
        result = await self.db.execute(select(Book).order_by(Book.id))
        return list(result.scalars().all())

    async def delete(self, book: Book) -> None:
        await self.db.delete(book)
        await self.db.flush()


class LibraryRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_books(self):
        # populate_existing so a library already in the identity map picks
        # up association rows written with Core statements.
        return (
            select(Library)
            .options(selectinload(Library.books))
            .execution_options(populate_existing=True)
        )

    async def create(self, created_by_id: int, name: str) -> Library:
        library = Library(created_by_id=created_by_id, name=name)
        self.db.add(library)
        await self.db.flush()
        return library

    async def find_by_owner(self, owner_id: int) -> Optional[Library]:
        result = await self.db.execute(
            select(Library).where(Library.created_by_id == owner_id)
        )
        return result.scalars().first()

    async def find_by_id(self, library_id: int) -> Optional[Library]:
        result = await self.db.execute(self._with_books().where(Library.id == library_id))
        return result.scalars().first()

    async def list_all(self) -> list[Library]:
        result = await self.db.execute(self._with_books().order_by(Library.id))
        return list(result.scalars().all())

    async def attach_books(self, library_id: int, book_ids: Iterable[int]) -> None:
        rows = [{"library_id": library_id, "book_id": book_id} for book_id in book_ids]
        if rows:
            await self.db.execute(insert(library_books), rows)

    async def add_book(self, library_id: int, book_id: int) -> None:
        await self.db.execute(
            insert(library_books).values(library_id=library_id, book_id=book_id)
        )

    async def remove_book(self, library_id: int, book_id: int) -> bool:
        """Delete one association row. Returns False if it did not exist."""
        result = await self.db.execute(
            delete(library_books).where(
                library_books.c.library_id == library_id,
                library_books.c.book_id == book_id,
            )
        )
        return result.rowcount > 0

    async def has_book(self, library_id: int, book_id: int) -> bool:
        result = await self.db.execute(
            select(library_books.c.book_id).where(
                library_books.c.library_id == library_id,
                library_books.c.book_id == book_id,
            )
        )
        return result.first() is not None

    async def delete(self, library: Library) -> None:
        await self.db.delete(library)
        await self.db.flush()


class NoteRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, created_by_id: int, **fields) -> Note:
        note = Note(created_by_id=created_by_id, **fields)
        self.db.add(note)
        await self.db.flush()
        await self.db.refresh(note)
        return note

    async def find(self, note_id: int) -> Optional[Note]:
        return await self.db.get(Note, note_id)

    async def list_by_owner(self, owner_id: int) -> list[Note]:
        result = await self.db.execute(
            select(Note).where(Note.created_by_id == owner_id).order_by(Note.id)
        )
        return list(result.scalars().all())

    async def delete(self, note: Note) -> None:
        await self.db.delete(note)
        await self.db.flush()
