"""Note repository for database operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
from typing import Optional, List, Dict, Iterable
from notekeeper.models.note import Note, NoteTag, new_id, utcnow
from notekeeper.utils.filters import escape_like


class NoteRepository:
    """Repository for Note model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, note_id: str) -> Optional[Note]:
        """Get note by ID, whoever owns it."""
        result = await self.db.execute(
            select(Note)
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_notes(
        self,
        user_id: str,
        query: Optional[str] = None,
        tag_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> List[Note]:
        """List a user's notes, most recently modified first."""
        stmt = select(Note).where(Note.user_id == user_id)

        if query:
            pattern = f"%{escape_like(query)}%"
            stmt = stmt.where(or_(
                Note.title.ilike(pattern, escape="\\"),
                Note.content.ilike(pattern, escape="\\"),
            ))

        if tag_id:
            stmt = stmt.where(
                Note.id.in_(select(NoteTag.note_id).where(NoteTag.tag_id == tag_id))
            )

        if category_id:
            stmt = stmt.where(Note.category_id == category_id)

        stmt = stmt.order_by(Note.updated_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_tag_ids(self, note_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Tag references per note, in stored order."""
        note_ids = list(note_ids)
        mapping: Dict[str, List[str]] = {note_id: [] for note_id in note_ids}
        if not note_ids:
            return mapping

        result = await self.db.execute(
            select(NoteTag.note_id, NoteTag.tag_id)
            .where(NoteTag.note_id.in_(note_ids))
            .order_by(NoteTag.note_id, NoteTag.position)
        )
        for note_id, tag_id in result.all():
            mapping[note_id].append(tag_id)
        return mapping

    def _add_tags(self, note_id: str, tag_ids: List[str]):
        for position, tag_id in enumerate(tag_ids):
            self.db.add(NoteTag(note_id=note_id, tag_id=tag_id, position=position))

    async def create(
        self,
        user_id: str,
        title: str,
        content: str,
        is_public: bool,
        category_id: Optional[str],
        tag_ids: List[str]
    ) -> Note:
        """Create a new note."""
        note = Note(
            id=new_id(),
            user_id=user_id,
            title=title,
            content=content,
            is_public=is_public,
            category_id=category_id,
        )
        self.db.add(note)
        await self.db.flush()
        self._add_tags(note.id, tag_ids)
        await self.db.commit()
        await self.db.refresh(note)
        return note

    async def update_owned(
        self,
        note_id: str,
        user_id: str,
        values: dict,
        tag_ids: Optional[List[str]] = None
    ) -> Optional[Note]:
        """
        Update a note only if it belongs to ``user_id``.

        The ownership check and the write are one UPDATE statement.

        Returns:
            The updated note, or None when no note matched
        """
        values = dict(values)
        values["updated_at"] = utcnow()
        result = await self.db.execute(
            update(Note)
            .where(Note.id == note_id, Note.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return None

        if tag_ids is not None:
            await self.db.execute(delete(NoteTag).where(NoteTag.note_id == note_id))
            self._add_tags(note_id, tag_ids)

        await self.db.commit()
        return await self.get_by_id(note_id)

    async def delete_owned(self, note_id: str, user_id: str) -> bool:
        """Delete a note only if it belongs to ``user_id``."""
        result = await self.db.execute(
            delete(Note)
            .where(Note.id == note_id, Note.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return False

        await self.db.execute(delete(NoteTag).where(NoteTag.note_id == note_id))
        await self.db.commit()
        return True

    async def batch_delete(self, user_id: str, note_ids: List[str]) -> int:
        """Delete the listed notes that belong to ``user_id``."""
        if not note_ids:
            return 0

        result = await self.db.execute(
            select(Note.id).where(Note.user_id == user_id, Note.id.in_(note_ids))
        )
        owned = list(result.scalars().all())
        if not owned:
            return 0

        await self.db.execute(delete(NoteTag).where(NoteTag.note_id.in_(owned)))
        await self.db.execute(
            delete(Note)
            .where(Note.user_id == user_id, Note.id.in_(owned))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return len(owned)
