"""Notes API endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
from notekeeper.config.database import get_db
from notekeeper.exceptions import NotFoundOrUnauthorized
from notekeeper.schemas.schemas import (
    CreateNoteRequest,
    UpdateNoteRequest,
    VisibilityRequest,
    BatchDeleteRequest,
    NoteItem,
    NoteView,
)
from notekeeper.services.note_service import NoteService
from notekeeper.middlewares.auth import get_current_user_id
from notekeeper.utils.filters import NoteFilter

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get("", response_model=List[NoteItem])
async def list_notes(
    q: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """List the requester's notes, filtered by text, tag and category."""
    service = NoteService(db)
    return await service.list_notes(user_id, NoteFilter.from_params(q, tag, category))


@router.post("", response_model=NoteItem, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: CreateNoteRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a new note."""
    service = NoteService(db)
    return await service.create_note(
        user_id,
        title=request.title,
        content=request.content,
        is_public=request.isPublic,
        tags=request.tags,
        category=request.category,
    )


@router.post(":batchDelete")
async def batch_delete_notes(
    request: BatchDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Batch delete notes."""
    service = NoteService(db)
    deleted = await service.batch_delete_notes(user_id, request.ids)
    return {"success": True, "deleted": deleted}


async def _visible_note(note_id: str, user_id: str, db: AsyncSession) -> dict:
    """Fetch a note the requester owns or that is public; not found otherwise."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    if not note or (note["userId"] != user_id and not note["isPublic"]):
        raise NotFoundOrUnauthorized("Note", note_id)
    return note


@router.get("/{noteId}", response_model=NoteItem)
async def get_note(
    noteId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get note details."""
    return await _visible_note(noteId, user_id, db)


@router.get("/{noteId}/view", response_model=NoteView)
async def view_note(
    noteId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get a note together with whether the requester may edit it."""
    note = await _visible_note(noteId, user_id, db)
    return {"note": note, "isOwner": note["userId"] == user_id}


@router.patch("/{noteId}", response_model=NoteItem)
async def update_note(
    noteId: str,
    request: UpdateNoteRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Update a note."""
    service = NoteService(db)
    update_data = request.model_dump(exclude_unset=True)
    return await service.update_note(noteId, user_id, **update_data)


@router.patch("/{noteId}/visibility", response_model=NoteItem)
async def set_note_visibility(
    noteId: str,
    request: VisibilityRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Make a note public or private without touching its other fields."""
    service = NoteService(db)
    return await service.update_note(noteId, user_id, isPublic=request.isPublic)


@router.delete("/{noteId}")
async def delete_note(
    noteId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete a note."""
    service = NoteService(db)
    await service.delete_note(noteId, user_id)
    return {"success": True}
