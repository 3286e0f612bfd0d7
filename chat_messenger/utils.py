"""Validation helpers shared by the dialog forms."""
from typing import List, Optional


def is_blank(value: Optional[str]) -> bool:
    """Return True for None, empty and whitespace-only strings."""
    return value is None or not value.strip()


def require_text(value: Optional[str], message: str) -> str:
    """Return the stripped value or raise ValueError with ``message``."""
    if is_blank(value):
        raise ValueError(message)
    return value.strip()


def parse_id(text: Optional[str], message: str) -> int:
    """Parse a positive integer id typed by the user."""
    if is_blank(text):
        raise ValueError(message)
    try:
        value = int(text.strip())
    except ValueError:
        raise ValueError(message) from None
    if value <= 0:
        raise ValueError(message)
    return value


def parse_id_list(text: Optional[str]) -> List[int]:
    """Parse a comma separated list of ids, skipping blank items."""
    if is_blank(text):
        return []
    ids: List[int] = []
    for item in text.split(","):
        if not item.strip():
            continue
        ids.append(parse_id(item, f"Invalid participant id: {item.strip()}"))
    return ids
