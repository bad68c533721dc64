"""
Notification Policy.

Decides whether an event is worth announcing at all.
"""

import re
from collections.abc import Iterable

# Text made only of these characters carries nothing worth announcing
_SYMBOLS_ONLY = re.compile(r"""^[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?\s]*$""")


def has_valid_content(text: str | None) -> bool:
    """
    True if text has something besides whitespace and punctuation.

    >>> has_valid_content("  buy milk ")
    True
    >>> has_valid_content("?!...")
    False
    """
    if not text:
        return False
    trimmed = text.strip()
    if not trimmed:
        return False
    return _SYMBOLS_ONLY.match(trimmed) is None


def first_valid_content(contents: Iterable[str | None]) -> str | None:
    """Return the first text with valid content, or None."""
    for content in contents:
        if has_valid_content(content):
            return content
    return None


def should_send_notification(
    user_id: str,
    board_id: str,
    board_name: str,
    enabled: bool,
    suppressed_board_names: Iterable[str] = (),
) -> bool:
    """
    Apply the per-board switch and the configured suppression list.

    Suppression is by exact board name and applies to every provider.
    user_id and board_id are accepted for per-user or per-board rules.
    """
    if not enabled:
        return False
    return board_name not in set(suppressed_board_names)
