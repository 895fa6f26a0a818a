"""Record identifier helpers."""
import uuid
from typing import Iterable, List, Optional

# Tags created in the editor but not saved yet carry ids with this prefix
PLACEHOLDER_PREFIX = "new-"

# Select values meaning "no selection" / "no filter"
SENTINEL_VALUES = frozenset({"", "none", "all"})


def is_valid_id(value) -> bool:
    """Whether ``value`` looks like a server-assigned record id."""
    if not isinstance(value, str) or not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def is_placeholder_id(value: str) -> bool:
    return value.startswith(PLACEHOLDER_PREFIX)


def clean_tag_ids(tag_ids: Optional[Iterable[str]]) -> List[str]:
    """
    Drop empty and placeholder ids, keeping the first occurrence order.

    Args:
        tag_ids: Tag ids as sent by the client

    Returns:
        Tag ids fit for storage
    """
    cleaned = []
    for tag_id in tag_ids or []:
        if not tag_id or is_placeholder_id(tag_id):
            continue
        if tag_id not in cleaned:
            cleaned.append(tag_id)
    return cleaned


def normalize_reference(value: Optional[str]) -> Optional[str]:
    """Map empty and sentinel selections to ``None``."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in SENTINEL_VALUES:
        return None
    return value
