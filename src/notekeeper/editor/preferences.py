"""Local, client-only note preferences."""
import json
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from notekeeper.config.settings import settings

logger = logging.getLogger(__name__)


class NotePreferences(BaseModel):
    """Preferences blob; missing keys take their defaults."""
    autosave: bool = True
    publicByDefault: bool = False


PreferencesListener = Callable[[NotePreferences], None]


class PreferencesStore:
    """
    Preferences kept in a local key/value file, one JSON string per key.

    Nothing here is sent to the server. Another process (or another open
    editor) may change the file; whoever watches for that calls
    ``notify_changed()`` and subscribers get the freshly read blob.
    """

    def __init__(self, path: Optional[str] = None, key: Optional[str] = None):
        self.path = Path(os.path.expanduser(path or settings.PREFERENCES_FILE))
        self.key = key or settings.PREFERENCES_KEY
        self._listeners: List[PreferencesListener] = []

    def _read_storage(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read local storage {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> NotePreferences:
        """Read the preferences, falling back to defaults on a missing or corrupt blob."""
        raw = self._read_storage().get(self.key)
        if raw is None:
            return NotePreferences()
        try:
            if isinstance(raw, str):
                return NotePreferences.model_validate_json(raw)
            return NotePreferences.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Error reading preferences: {e}")
            return NotePreferences()

    def save(self, preferences: NotePreferences):
        storage = self._read_storage()
        storage[self.key] = preferences.model_dump_json()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(storage), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info("Preferences saved successfully")

    def subscribe(self, listener: PreferencesListener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: PreferencesListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify_changed(self) -> NotePreferences:
        """Re-read the blob after an outside change and tell every subscriber."""
        preferences = self.load()
        for listener in list(self._listeners):
            listener(preferences)
        return preferences
