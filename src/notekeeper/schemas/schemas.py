"""Pydantic schemas for request/response validation."""
from pydantic import BaseModel, Field
from typing import Optional, List


# === Tags & Categories ===
class TagItem(BaseModel):
    """Tag item response."""
    id: str
    name: str
    userId: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class CategoryItem(TagItem):
    """Category item response."""


class NameRequest(BaseModel):
    """Create or rename a tag or category."""
    name: str


# === Notes ===
class CreateNoteRequest(BaseModel):
    """Create note request."""
    title: str
    content: Optional[str] = ""
    isPublic: bool = False
    tags: List[str] = Field(default_factory=list, description="Tag ids; unsaved placeholder ids are dropped")
    category: Optional[str] = None


class UpdateNoteRequest(BaseModel):
    """Update note request. Only the fields sent are changed."""
    title: Optional[str] = None
    content: Optional[str] = None
    isPublic: Optional[bool] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None


class VisibilityRequest(BaseModel):
    """Change only the visibility of a note."""
    isPublic: bool


class NoteItem(BaseModel):
    """Note item response."""
    id: str
    title: str
    content: str
    isPublic: bool
    userId: str
    tags: List[TagItem] = []
    category: Optional[CategoryItem] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class NoteView(BaseModel):
    """A note as seen by the requester."""
    note: NoteItem
    isOwner: bool


class BatchDeleteRequest(BaseModel):
    """Batch delete request."""
    ids: List[str] = Field(default_factory=list)
