"""Editor synchronization: draft state, debounced autosave and visibility toggle."""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from notekeeper.config.settings import settings
from notekeeper.editor.preferences import NotePreferences, PreferencesStore
from notekeeper.editor.scheduler import AsyncioScheduler, Debouncer, Scheduler
from notekeeper.utils.ids import PLACEHOLDER_PREFIX, clean_tag_ids, normalize_reference

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    CLEAN = "clean"
    DIRTY_UNSAVED = "dirty-unsaved"
    SAVING = "saving"
    SAVE_FAILED = "save-failed"


class NotesGateway(Protocol):
    """What the editor needs from the notes API (see ``NotesApiClient``)."""

    async def create_note(self, data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def update_note(self, note_id: str, data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def delete_note(self, note_id: str) -> None: ...

    async def list_tags(self) -> List[Dict[str, Any]]: ...

    async def list_categories(self) -> List[Dict[str, Any]]: ...


@dataclass
class NoteDraft:
    """Local, possibly unsaved, field values of the note being edited."""
    title: str = ""
    content: str = ""
    is_public: bool = False
    tags: List[str] = field(default_factory=list)
    category: Optional[str] = None

    @classmethod
    def from_note(cls, note: Dict[str, Any]) -> "NoteDraft":
        category = note.get("category") or {}
        return cls(
            title=note.get("title") or "",
            content=note.get("content") or "",
            is_public=bool(note.get("isPublic", False)),
            tags=[tag["id"] for tag in note.get("tags") or []],
            category=category.get("id"),
        )

    def to_payload(self, include_visibility: bool = True) -> Dict[str, Any]:
        """Full-save body; unsaved placeholder tags are left out."""
        payload = {
            "title": self.title.strip(),
            "content": self.content,
            "tags": clean_tag_ids(self.tags),
            "category": self.category,
        }
        if include_visibility:
            payload["isPublic"] = self.is_public
        return payload


Navigate = Callable[[str], None]
Notify = Callable[[str, str], None]


class EditorSession:
    """
    One open editor for one note (``note=None`` for a new note).

    States move clean -> dirty-unsaved on any edit, dirty-unsaved -> saving
    on a manual save or when the autosave timer elapses, and saving ->
    clean or save-failed. Edits are never blocked; saves of one session
    run one at a time against the latest draft. The visibility toggle of
    an existing note is saved on its own, outside that flow.

    ``on_notify(level, message)`` receives "success" / "error" messages
    and ``on_navigate(path)`` is called after a manual create and after
    delete.
    """

    def __init__(
        self,
        gateway: NotesGateway,
        preferences: PreferencesStore,
        note: Optional[Dict[str, Any]] = None,
        scheduler: Optional[Scheduler] = None,
        autosave_delay: Optional[float] = None,
        on_navigate: Optional[Navigate] = None,
        on_notify: Optional[Notify] = None,
    ):
        self.gateway = gateway
        self.preferences_store = preferences
        self.preferences = NotePreferences()
        self.note = note
        self.note_id: Optional[str] = note["id"] if note else None
        self.draft = NoteDraft.from_note(note) if note else NoteDraft()
        self.on_navigate = on_navigate
        self.on_notify = on_notify

        self.state = EditorState.CLEAN
        self.last_error: Optional[str] = None
        self.tags: List[Dict[str, Any]] = []
        self.categories: List[Dict[str, Any]] = []

        self._revision = 0
        self._saved_revision = 0
        self._save_lock = asyncio.Lock()
        self._debouncer = Debouncer(
            scheduler or AsyncioScheduler(),
            settings.AUTOSAVE_DELAY_SECONDS if autosave_delay is None else autosave_delay,
            self._autosave,
        )
        self._mounted = False

    @property
    def is_new(self) -> bool:
        return self.note_id is None

    @property
    def dirty(self) -> bool:
        """Whether the draft has edits not covered by a successful save."""
        return self._revision != self._saved_revision

    @property
    def autosave_pending(self) -> bool:
        return self._debouncer.pending

    # ============ Lifecycle ============

    async def mount(self):
        """Read preferences, start listening for changes and load tag/category choices."""
        if self._mounted:
            return
        self._mounted = True

        self.preferences = self.preferences_store.load()
        self.preferences_store.subscribe(self._on_preferences_changed)
        if self.is_new:
            self.draft.is_public = self.preferences.publicByDefault

        try:
            self.tags, self.categories = await asyncio.gather(
                self.gateway.list_tags(),
                self.gateway.list_categories(),
            )
        except Exception as e:
            logger.error(f"Failed to load tags and categories: {e}")
            self.last_error = "Failed to load tags and categories. Please refresh the page."

    def unmount(self):
        self._debouncer.cancel()
        if self._mounted:
            self.preferences_store.unsubscribe(self._on_preferences_changed)
            self._mounted = False

    def _on_preferences_changed(self, preferences: NotePreferences):
        self.preferences = preferences

    # ============ Edits ============

    def _mark_dirty(self):
        self._revision += 1
        if self.state != EditorState.SAVING:
            self.state = EditorState.DIRTY_UNSAVED
        self._debouncer.trigger()

    def set_title(self, title: str):
        self.draft.title = title
        self._mark_dirty()

    def set_content(self, content: str):
        self.draft.content = content
        self._mark_dirty()

    def toggle_tag(self, tag_id: str):
        if tag_id in self.draft.tags:
            self.draft.tags.remove(tag_id)
        else:
            self.draft.tags.append(tag_id)
        self._mark_dirty()

    def set_category(self, category_id: Optional[str]):
        self.draft.category = normalize_reference(category_id)
        self._mark_dirty()

    def add_tag(self, name: str) -> Optional[Dict[str, Any]]:
        """Add a local-only tag and select it. It is not sent on save."""
        name = name.strip()
        if not name:
            return None

        tag = {"id": f"{PLACEHOLDER_PREFIX}{int(time.time() * 1000)}", "name": name, "userId": ""}
        self.tags.append(tag)
        self.draft.tags.append(tag["id"])
        self._mark_dirty()
        return tag

    # ============ Saving ============

    async def _autosave(self):
        if not self.dirty or self.is_new or not self.preferences.autosave:
            return
        logger.debug(f"Autosaving note {self.note_id}")
        await self.save(manual=False)

    async def save(self, manual: bool = True) -> bool:
        """
        Save the draft.

        Args:
            manual: False for autosaves, which never navigate

        Returns:
            Whether the draft is saved
        """
        self._debouncer.cancel()

        async with self._save_lock:
            if not manual and not self.dirty:
                return True

            if not self.draft.title.strip():
                self._notify("error", "Title is required")
                return False

            created = self.is_new
            # Visibility of an existing note is only ever written by set_public
            payload = self.draft.to_payload(include_visibility=created)
            revision = self._revision
            self.state = EditorState.SAVING
            self.last_error = None

            try:
                if created:
                    saved = await self.gateway.create_note(payload)
                    if not saved or not saved.get("id"):
                        raise ValueError("Failed to get new note ID")
                else:
                    saved = await self.gateway.update_note(self.note_id, payload)
            except Exception as e:
                logger.error(f"Error saving note: {e}")
                self.last_error = str(e) or "Failed to save note"
                self.state = EditorState.SAVE_FAILED
                self._notify("error", self.last_error)
                return False

            self.note = saved
            self.note_id = saved["id"]
            self._saved_revision = revision

            if self.dirty:
                self.state = EditorState.DIRTY_UNSAVED
                self._debouncer.trigger()
            else:
                self.state = EditorState.CLEAN

        if created:
            self._notify("success", "Note created successfully")
            if manual and self.on_navigate:
                self.on_navigate(f"/notes/{self.note_id}")
        else:
            self._notify("success", "Note updated successfully")
        return True

    async def set_public(self, value: bool) -> bool:
        """
        Change visibility.

        An existing note is updated right away with only ``isPublic``; on
        failure the flag goes back to its previous value. For a new note
        the flag is part of the draft.
        """
        previous = self.draft.is_public
        self.draft.is_public = value

        if self.is_new:
            self._mark_dirty()
            return True

        try:
            updated = await self.gateway.update_note(self.note_id, {"isPublic": value})
        except Exception as e:
            logger.error(f"Failed to update visibility: {e}")
            self.draft.is_public = previous
            self._notify("error", "Failed to update visibility")
            return False

        if self.note is not None and updated:
            self.note = {**self.note, "isPublic": updated.get("isPublic", value)}
        self._notify("success", f"Note is now {'public' if value else 'private'}")
        return True

    async def delete(self) -> bool:
        if self.is_new:
            return False

        self._debouncer.cancel()
        try:
            await self.gateway.delete_note(self.note_id)
        except Exception as e:
            logger.error(f"Error deleting note: {e}")
            self._notify("error", "Failed to delete note")
            return False

        if self.on_navigate:
            self.on_navigate("/")
        self._notify("success", "Note deleted successfully")
        return True

    def _notify(self, level: str, message: str):
        if self.on_notify:
            self.on_notify(level, message)
