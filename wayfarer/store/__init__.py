# store/__init__.py
"""
Store Package

Comment persistence backends:
- base: Snapshot types and the optimistic-concurrency write loop
- local_store: JSON file private to this process
- github_store: JSON file in a GitHub repository
- factory: Backend selection from settings
"""

from .base import CommentStore, InitResult, Snapshot, WriteResult
from .factory import create_comment_store
from .github_store import GitHubCommentStore
from .local_store import LocalFileCommentStore, WriteGuard

__all__ = [
    "CommentStore",
    "InitResult",
    "Snapshot",
    "WriteResult",
    "create_comment_store",
    "GitHubCommentStore",
    "LocalFileCommentStore",
    "WriteGuard",
]
