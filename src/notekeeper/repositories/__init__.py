"""Data access layer repositories."""
from .note_repository import NoteRepository
from .tag_repository import NamedRecordRepository, TagRepository, CategoryRepository

__all__ = [
    "NoteRepository",
    "NamedRecordRepository",
    "TagRepository",
    "CategoryRepository",
]
