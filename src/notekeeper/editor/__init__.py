"""Client-side note editing: autosave, visibility toggle, preferences and API client."""
from notekeeper.editor.client import ApiError, NotesApiClient
from notekeeper.editor.preferences import NotePreferences, PreferencesStore
from notekeeper.editor.scheduler import AsyncioScheduler, Debouncer, Scheduler
from notekeeper.editor.session import EditorSession, EditorState, NoteDraft

__all__ = [
    "ApiError",
    "NotesApiClient",
    "NotePreferences",
    "PreferencesStore",
    "AsyncioScheduler",
    "Debouncer",
    "Scheduler",
    "EditorSession",
    "EditorState",
    "NoteDraft",
]
