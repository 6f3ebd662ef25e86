# comments/validation.py
"""
Comment validation and sanitization.

sanitize_text() only neutralizes angle brackets so stored text cannot open
markup when a page renders it. It is not an HTML sanitizer: attributes,
entities and URLs are left as typed.

Length bounds apply to the stored form, after trimming and escaping, so an
escaped bracket counts as the four characters it occupies.
"""

import secrets
import time
from typing import Optional, Tuple

from ..errors import CommentValidationError

NAME_MAX_LENGTH = 100
TEXT_MAX_LENGTH = 1000


def sanitize_text(value: str) -> str:
    """Escape < and > as HTML entities"""
    return value.replace("<", "&lt;").replace(">", "&gt;")


def _require(field: str, value: Optional[str], max_length: int) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise CommentValidationError(field, f"{field} must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise CommentValidationError(field, f"{field} is required")
    escaped = sanitize_text(cleaned)
    if len(escaped) > max_length:
        raise CommentValidationError(field, f"{field} must be at most {max_length} characters")
    return escaped


def validate_comment_input(name: Optional[str], text: Optional[str]) -> Tuple[str, str]:
    """
    Check and clean a new comment before any store access.

    Args:
        name: Display name as submitted
        text: Comment body as submitted

    Returns:
        (name, text): Trimmed and sanitized

    Raises:
        CommentValidationError: Missing, blank or too long
    """
    return _require("name", name, NAME_MAX_LENGTH), _require("text", text, TEXT_MAX_LENGTH)


def new_comment_id(now: Optional[float] = None) -> str:
    """Millisecond timestamp plus a random suffix, e.g. '1718000000000-3fa9c2'"""
    millis = int((now if now is not None else time.time()) * 1000)
    return f"{millis}-{secrets.token_hex(3)}"
