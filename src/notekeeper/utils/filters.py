"""Note listing filters built from the address bar or the search form."""
from dataclasses import dataclass
from typing import Dict, Optional

from notekeeper.utils.ids import normalize_reference


@dataclass(frozen=True)
class NoteFilter:
    """
    Listing filter for notes.

    Filter types combine with AND; the free text matches title OR content.
    ``None`` means the filter is not applied.
    """
    q: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        q: Optional[str] = None,
        tag: Optional[str] = None,
        category: Optional[str] = None,
    ) -> "NoteFilter":
        """Build a filter, dropping blank and "all"/"none" selections."""
        text = q.strip() if q else None
        return cls(
            q=text or None,
            tag=normalize_reference(tag),
            category=normalize_reference(category),
        )

    @property
    def is_active(self) -> bool:
        return bool(self.q or self.tag or self.category)

    def to_query_params(self) -> Dict[str, str]:
        """Query parameters for the listing URL, only for filters that are set."""
        params = {}
        if self.q:
            params["q"] = self.q
        if self.tag:
            params["tag"] = self.tag
        if self.category:
            params["category"] = self.category
        return params


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return (
        text.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
