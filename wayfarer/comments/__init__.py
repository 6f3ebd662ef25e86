# comments/__init__.py
"""
Comments Package

- validation: Input bounds, angle-bracket neutralization, id generation
- service: Create/list/delete on top of a comment store, skipping malformed records when listing
"""

from .service import CommentService, append_comment, remove_comment, sort_newest_first, well_formed
from .validation import (
    NAME_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    new_comment_id,
    sanitize_text,
    validate_comment_input,
)

__all__ = [
    "CommentService",
    "append_comment",
    "remove_comment",
    "sort_newest_first",
    "well_formed",
    "NAME_MAX_LENGTH",
    "TEXT_MAX_LENGTH",
    "new_comment_id",
    "sanitize_text",
    "validate_comment_input",
]
