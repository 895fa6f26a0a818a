"""Note database models."""
from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey
from notekeeper.config.database import Base
from datetime import datetime, timezone
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Note(Base):
    """Note model."""
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    is_public = Column(Boolean, nullable=False, default=False)
    # No FK: a deleted category leaves the reference dangling, resolved as absent on read
    category_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False, index=True)

    def to_dict(self, tags=None, category=None):
        """Convert to dictionary, with already resolved tag and category dicts."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content or "",
            "isPublic": bool(self.is_public),
            "userId": self.user_id,
            "tags": tags or [],
            "category": category,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class NoteTag(Base):
    """Tag reference held by a note, in the order the tags were given."""
    __tablename__ = "note_tags"

    note_id = Column(String(36), ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True)
    # No FK: tag deletion does not cascade to the notes referencing it
    tag_id = Column(String(36), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)
