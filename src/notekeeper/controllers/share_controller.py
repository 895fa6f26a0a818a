"""Public shared-note endpoint. No credentials required."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from notekeeper.config.database import get_db
from notekeeper.exceptions import NotFoundOrUnauthorized
from notekeeper.schemas.schemas import NoteItem
from notekeeper.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/share", tags=["Share"])


@router.get("/{noteId}", response_model=NoteItem)
async def get_shared_note(
    noteId: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Read a shared note.

    A private note answers exactly like a missing one, so the link stops
    working as soon as the note is made private.
    """
    note = await NoteService(db).get_note(noteId)
    if not note or note["isPublic"] is not True:
        logger.info(f"Shared note {noteId} is missing or not public")
        raise NotFoundOrUnauthorized("Note", noteId, message="Note not found")
    return note
