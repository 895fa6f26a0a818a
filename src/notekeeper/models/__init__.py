"""Database models."""
from .note import Note, NoteTag
from .tag import Tag, Category

__all__ = [
    "Note",
    "NoteTag",
    "Tag",
    "Category",
]
