"""Note API routes. All require authentication."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.api.params import parse_id
from bookshelf.auth.dependencies import get_current_user
from bookshelf.auth.jwt import Principal
from bookshelf.db.engine import get_db
from bookshelf.schemas.note import NoteCreate, NoteRead
from bookshelf.services.note_service import NoteService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> NoteService:
    return NoteService(db)


@router.post("/notes", response_model=NoteRead, status_code=201)
async def create_note(
    body: NoteCreate,
    principal: Principal = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    return await svc.create_note(principal, title=body.title, description=body.description)


@router.get("/notes", response_model=list[NoteRead])
async def list_notes(
    principal: Principal = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    """The caller's own notes."""
    return await svc.list_notes(principal)


@router.get("/notes/{note_id}", response_model=NoteRead)
async def get_note(note_id: str, svc: NoteService = Depends(_svc)):
    return await svc.get_note(parse_id(note_id, "Note"))


@router.delete("/notes/{note_id}")
async def delete_note(
    note_id: str,
    principal: Principal = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    await svc.delete_note(principal, parse_id(note_id, "Note"))
    return {"message": "Note successfully deleted"}
