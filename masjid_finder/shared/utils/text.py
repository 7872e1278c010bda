"""Text helpers"""

import re
from typing import Any, Mapping, Optional


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    Normalize free text

    - Strip surrounding whitespace
    - Collapse runs of whitespace into one space
    """
    if not text:
        return None

    text = re.sub(r"\s+", " ", text).strip()

    return text if text else None


def first_present(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """
    Return the first truthy value among the given keys

    Args:
        record: Source mapping
        keys: Candidate keys, in priority order

    Returns:
        The first truthy value, or None
    """
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def truncate_text(text: str, max_length: int = 60, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length

    Args:
        text: Text to truncate
        max_length: Maximum number of characters
        suffix: Suffix appended when truncated

    Returns:
        Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix
