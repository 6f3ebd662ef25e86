# comments/service.py
"""
Comment Service
Create/list/delete over a CommentStore.

Mutations are expressed as pure functions of the current records so the
store's retry loop can recompute them against every fresh read.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError

from ..errors import CommentNotFoundError
from ..schemas.api_schemas import Comment
from ..store.base import CommentRecords, CommentStore, InitResult
from .validation import new_comment_id, validate_comment_input


# ============================================
# Pure mutators
# ============================================

def append_comment(comments: CommentRecords, comment: Dict[str, Any]) -> CommentRecords:
    """New list with comment at the head; the id is re-drawn if already taken"""
    taken = {c.get("id") for c in comments}
    record = dict(comment)
    while record["id"] in taken:
        record["id"] = new_comment_id()
    return [record] + list(comments)


def remove_comment(comments: CommentRecords, comment_id: str) -> CommentRecords:
    """New list without comment_id; raises CommentNotFoundError if absent"""
    remaining = [c for c in comments if c.get("id") != comment_id]
    if len(remaining) == len(comments):
        raise CommentNotFoundError(comment_id)
    return remaining


def sort_newest_first(comments: CommentRecords) -> CommentRecords:
    return sorted(comments, key=lambda c: str(c.get("created_at") or ""), reverse=True)


def well_formed(comments: CommentRecords) -> CommentRecords:
    """Records that fit the Comment model; anything else is logged and left out"""
    kept = []
    for record in comments:
        try:
            Comment.model_validate(record)
        except ValidationError as e:
            label = record.get("id") if isinstance(record, dict) else type(record).__name__
            logger.warning(f"Skipping malformed comment record {label!r}: {e.error_count()} problem(s)")
            continue
        kept.append(record)
    return kept


# ============================================
# Service
# ============================================

class CommentService:
    """Comment operations on top of a store"""

    def __init__(self, store: CommentStore):
        self.store = store

    async def list_comments(self) -> List[Dict[str, Any]]:
        snapshot = await self.store.list_snapshot()
        return sort_newest_first(well_formed(snapshot.comments))

    async def create_comment(self, name: Any, text: Any) -> Dict[str, Any]:
        """
        Validate, then append a new comment.

        Args:
            name: Display name as submitted
            text: Body as submitted

        Returns:
            The stored comment record (with the id actually written)

        Raises:
            CommentValidationError: Before any store access
            StorageConflictError / StorageUnavailableError: From the store
        """
        clean_name, clean_text = validate_comment_input(name, text)
        now = datetime.now(timezone.utc)
        comment = {
            "id": new_comment_id(now.timestamp()),
            "name": clean_name,
            "text": clean_text,
            "created_at": now.isoformat().replace("+00:00", "Z"),
        }

        written = await self.store.mutate(lambda current: append_comment(current, comment))
        stored = written[0]
        logger.info(f"Created comment {stored['id']} by '{stored['name']}' ({len(written)} total)")
        return stored

    async def delete_comment(self, comment_id: str) -> None:
        written = await self.store.mutate(lambda current: remove_comment(current, comment_id))
        logger.info(f"Deleted comment {comment_id} ({len(written)} remaining)")

    async def initialize(self) -> InitResult:
        result = await self.store.initialize()
        logger.info(f"Comment store init: created={result.created} reason={result.reason}")
        return result
