"""Book API routes.

Learn: GET /books is open to anyone; every other book route needs a
valid token. Only the creator may delete a book.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.api.params import parse_id
from bookshelf.auth.dependencies import get_current_user
from bookshelf.auth.jwt import Principal
from bookshelf.db.engine import get_db
from bookshelf.schemas.book import BookCreate, BookRead
from bookshelf.services.book_service import BookService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> BookService:
    return BookService(db)


@router.post("/books", response_model=BookRead, status_code=201)
async def create_book(
    body: BookCreate,
    principal: Principal = Depends(get_current_user),
    svc: BookService = Depends(_svc),
):
    """Create a book owned by the caller."""
    return await svc.create_book(
        principal,
        title=body.title,
        author=body.author,
        description=body.description,
        pages=body.pages,
        image=body.image,
    )


@router.get("/books", response_model=list[BookRead])
async def list_books(svc: BookService = Depends(_svc)):
    return await svc.list_books()


@router.get("/books/{book_id}", response_model=BookRead)
async def get_book(
    book_id: str,
    principal: Principal = Depends(get_current_user),
    svc: BookService = Depends(_svc),
):
    return await svc.get_book(parse_id(book_id, "Book"))


@router.delete("/books/{book_id}")
async def delete_book(
    book_id: str,
    principal: Principal = Depends(get_current_user),
    svc: BookService = Depends(_svc),
):
    await svc.delete_book(principal, parse_id(book_id, "Book"))
    return {"message": "Book successfully deleted"}
