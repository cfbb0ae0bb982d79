"""Library API routes.

Learn: all routes here sit behind the auth dependency (applied when the
router is included). The add/remove PUTs take ``{"bookId": n}``; the
service checks 404, then ownership, then the body.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.api.params import parse_id
from bookshelf.auth.dependencies import get_current_user
from bookshelf.auth.jwt import Principal
from bookshelf.db.engine import get_db
from bookshelf.schemas.library import LibraryBookChange, LibraryCreate, LibraryRead
from bookshelf.services.library_service import LibraryService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> LibraryService:
    return LibraryService(db)


@router.post("/libraries", response_model=LibraryRead, status_code=201)
async def create_library(
    body: LibraryCreate,
    principal: Principal = Depends(get_current_user),
    svc: LibraryService = Depends(_svc),
):
    """Create the caller's library (one per user)."""
    return await svc.create_library(principal, name=body.name, book_ids=body.books)


@router.get("/libraries", response_model=list[LibraryRead])
async def list_libraries(svc: LibraryService = Depends(_svc)):
    return await svc.list_libraries()


@router.get("/libraries/{library_id}", response_model=LibraryRead)
async def get_library(library_id: str, svc: LibraryService = Depends(_svc)):
    return await svc.get_library(parse_id(library_id, "Library"))


@router.put("/libraries/{library_id}", response_model=LibraryRead)
async def add_book_to_library(
    library_id: str,
    body: Optional[LibraryBookChange] = Body(None),
    principal: Principal = Depends(get_current_user),
    svc: LibraryService = Depends(_svc),
):
    """Add one book to the caller's library."""
    book_id = body.book_id if body else None
    return await svc.add_book(principal, parse_id(library_id, "Library"), book_id)


@router.put("/libraries/{library_id}/remove-book", response_model=LibraryRead)
async def remove_book_from_library(
    library_id: str,
    body: Optional[LibraryBookChange] = Body(None),
    principal: Principal = Depends(get_current_user),
    svc: LibraryService = Depends(_svc),
):
    """Remove one book from the caller's library."""
    book_id = body.book_id if body else None
    return await svc.remove_book(principal, parse_id(library_id, "Library"), book_id)


@router.delete("/libraries/{library_id}")
async def delete_library(
    library_id: str,
    principal: Principal = Depends(get_current_user),
    svc: LibraryService = Depends(_svc),
):
    await svc.delete_library(principal, parse_id(library_id, "Library"))
    return {"message": "Library successfully deleted"}
