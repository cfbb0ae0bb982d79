"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror what is declared here.

Ownership lives in ``created_by_id`` on every resource and is never
reassigned. The two uniqueness rules the services depend on are
constraints, not application checks:
- one library per user  → unique libraries.created_by_id
- a book once per library → composite primary key on library_books
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# Largest value an INTEGER column holds on every supported backend.
MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# Many-to-many Library <-> Book. Rows vanish with either side.
library_books = Table(
    "library_books",
    Base.metadata,
    Column(
        "library_id",
        Integer,
        ForeignKey("libraries.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """An account. Immutable after signup."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    books: Mapped[list["Book"]] = relationship(back_populates="created_by")
    library: Mapped[Optional["Library"]] = relationship(
        back_populates="created_by", uselist=False
    )
    notes: Mapped[list["Note"]] = relationship(back_populates="created_by")


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    pages: Mapped[Optional[int]] = mapped_column(Integer)
    image: Mapped[Optional[str]] = mapped_column(String(2048))
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    created_by: Mapped["User"] = relationship(back_populates="books")


class Library(Base):
    """A user's personal shelf. At most one per user."""

    __tablename__ = "libraries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), unique=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    created_by: Mapped["User"] = relationship(back_populates="library")
    books: Mapped[list["Book"]] = relationship(
        secondary=library_books,
        order_by=Book.id,
        passive_deletes=True,
    )


class Note(Base):
    """Private note. Listing is scoped to the owner."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    created_by: Mapped["User"] = relationship(back_populates="notes")
