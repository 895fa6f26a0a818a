"""Note service business logic."""
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from notekeeper.exceptions import NotFoundOrUnauthorized, ValidationError
from notekeeper.models.note import Note
from notekeeper.repositories.note_repository import NoteRepository
from notekeeper.repositories.tag_repository import TagRepository, CategoryRepository
from notekeeper.services.base import action
from notekeeper.utils.filters import NoteFilter
from notekeeper.utils.ids import is_valid_id, clean_tag_ids, normalize_reference

logger = logging.getLogger(__name__)


def _require_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("title", "Title is required")
    return title


class NoteService:
    """Service for note operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.note_repo = NoteRepository(db)
        self.tag_repo = TagRepository(db)
        self.category_repo = CategoryRepository(db)

    async def _render(self, notes: List[Note]) -> List[dict]:
        """Inline the referenced tags and category of each note.

        References to records that no longer exist are dropped.
        """
        tag_ids_by_note = await self.note_repo.get_tag_ids(note.id for note in notes)
        wanted_tags = {tag_id for tag_ids in tag_ids_by_note.values() for tag_id in tag_ids}
        tags = {tag.id: tag.to_dict() for tag in await self.tag_repo.get_many(wanted_tags)}

        wanted_categories = {note.category_id for note in notes if note.category_id}
        categories = {
            category.id: category.to_dict()
            for category in await self.category_repo.get_many(wanted_categories)
        }

        return [
            note.to_dict(
                tags=[tags[tag_id] for tag_id in tag_ids_by_note[note.id] if tag_id in tags],
                category=categories.get(note.category_id),
            )
            for note in notes
        ]

    async def _render_one(self, note: Note) -> dict:
        return (await self._render([note]))[0]

    @action("Failed to get notes. Please try again later.")
    async def list_notes(self, user_id: str, note_filter: Optional[NoteFilter] = None) -> List[dict]:
        """List notes for user."""
        note_filter = note_filter or NoteFilter()
        notes = await self.note_repo.list_notes(
            user_id,
            query=note_filter.q,
            tag_id=note_filter.tag,
            category_id=note_filter.category,
        )
        return await self._render(notes)

    @action("Failed to get note. Please try again later.")
    async def get_note(self, note_id: str) -> Optional[dict]:
        """
        Get a note by id without any owner check.

        Public notes must be readable by anyone, so deciding who may see
        the result is left to the caller. Malformed ids give None.
        """
        if not is_valid_id(note_id):
            logger.info(f"Invalid note ID format: {note_id!r}")
            return None

        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            logger.info(f"Note not found with ID: {note_id}")
            return None
        return await self._render_one(note)

    @action("Failed to create note. Please try again later.")
    async def create_note(
        self,
        user_id: str,
        title: str,
        content: Optional[str] = "",
        is_public: bool = False,
        tags: Optional[List[str]] = None,
        category: Optional[str] = None
    ) -> dict:
        """Create a new note."""
        note = await self.note_repo.create(
            user_id,
            title=_require_title(title),
            content=content if content is not None else "",
            is_public=bool(is_public),
            category_id=normalize_reference(category),
            tag_ids=clean_tag_ids(tags),
        )
        logger.info(f"Note created: {note.id} by user {user_id}")
        return await self._render_one(note)

    @action("Failed to update note. Please try again later.")
    async def update_note(self, note_id: str, user_id: str, **kwargs) -> dict:
        """
        Update the given fields of a note owned by ``user_id``.

        Accepted keys: title, content, isPublic, tags, category. A key set
        to None is ignored, except ``category`` where it clears the
        category.
        """
        values = {}
        if kwargs.get("title") is not None:
            values["title"] = _require_title(kwargs["title"])
        elif "title" in kwargs:
            raise ValidationError("title", "Title is required")

        if kwargs.get("content") is not None:
            values["content"] = kwargs["content"]

        if kwargs.get("isPublic") is not None:
            values["is_public"] = bool(kwargs["isPublic"])
            logger.info(f"Setting isPublic of note {note_id} to: {values['is_public']}")

        if "category" in kwargs:
            values["category_id"] = normalize_reference(kwargs["category"])

        tag_ids = None
        if kwargs.get("tags") is not None:
            tag_ids = clean_tag_ids(kwargs["tags"])

        note = await self.note_repo.update_owned(note_id, user_id, values, tag_ids)
        if note is None:
            raise NotFoundOrUnauthorized("Note", note_id)

        logger.info(f"Note updated: {note.id} isPublic: {note.is_public}")
        return await self._render_one(note)

    @action("Failed to delete note. Please try again later.")
    async def delete_note(self, note_id: str, user_id: str):
        """Delete a note owned by ``user_id``."""
        deleted = await self.note_repo.delete_owned(note_id, user_id)
        if not deleted:
            raise NotFoundOrUnauthorized("Note", note_id)
        logger.info(f"Note deleted: {note_id} by user {user_id}")

    @action("Failed to delete notes. Please try again later.")
    async def batch_delete_notes(self, user_id: str, note_ids: List[str]) -> int:
        """Batch delete notes; ids not owned by the user are skipped."""
        count = await self.note_repo.batch_delete(user_id, note_ids)
        logger.info(f"User {user_id} batch deleted {count} note(s)")
        return count
