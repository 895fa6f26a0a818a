"""Domain actions."""
from .note_service import NoteService
from .tag_service import TagService, CategoryService

__all__ = ["NoteService", "TagService", "CategoryService"]
