"""Book service — create, list, read and delete books.

Listing is public, reading one book needs any valid token, and deletion
is limited to the book's creator.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.jwt import Principal
from bookshelf.auth.ownership import ensure_owner
from bookshelf.db.models import Book
from bookshelf.db.repositories import BookRepository
from bookshelf.errors import NotFound

logger = structlog.get_logger()


class BookService:
    """Business logic for books."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.books = BookRepository(db)

    async def create_book(
        self,
        principal: Principal,
        title: str,
        author: Optional[str] = None,
        description: Optional[str] = None,
        pages: Optional[int] = None,
        image: Optional[str] = None,
    ) -> Book:
        try:
            book = await self.books.create(
                created_by_id=principal.id,
                title=title,
                author=author,
                description=description,
                pages=pages,
                image=image,
            )
        except IntegrityError:
            # The owner FK is the only constraint here: the token outlived its user.
            await self.db.rollback()
            raise NotFound("User not found.")
        await self.db.commit()
        logger.info("book.created", book_id=book.id, user_id=principal.id)
        return book

    async def list_books(self) -> list[Book]:
        return await self.books.list_all()

    async def get_book(self, book_id: int) -> Book:
        book = await self.books.find(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    async def delete_book(self, principal: Principal, book_id: int) -> None:
        book = await self.get_book(book_id)
        ensure_owner(
            principal,
            book.created_by_id,
            "Unauthorized - you can only delete books you've created",
        )
        await self.books.delete(book)
        await self.db.commit()
        logger.info("book.deleted", book_id=book_id, user_id=principal.id)
