# store/factory.py
"""Pick the comment store from configuration"""

from typing import Optional

from loguru import logger

from ..config import Settings, settings as default_settings
from .base import CommentStore
from .github_store import GitHubCommentStore
from .local_store import LocalFileCommentStore


def create_comment_store(config: Optional[Settings] = None) -> CommentStore:
    """
    Build the configured comment store.

    Args:
        config: Settings to read from (defaults to the global settings)

    Returns:
        CommentStore: GitHubCommentStore when COMMENTS_BACKEND=github, else LocalFileCommentStore

    Raises:
        ValueError: Unknown backend, or github selected without GITHUB_REPO
    """
    config = config or default_settings
    backend = config.COMMENTS_BACKEND.lower()

    if backend == "github":
        if not config.GITHUB_REPO:
            raise ValueError("COMMENTS_BACKEND=github requires GITHUB_REPO")
        logger.info(f"Comment store: GitHub {config.GITHUB_REPO}@{config.GITHUB_BRANCH}:{config.GITHUB_PATH}")
        return GitHubCommentStore(
            repo=config.GITHUB_REPO,
            path=config.GITHUB_PATH,
            branch=config.GITHUB_BRANCH,
            token=config.GITHUB_TOKEN,
            api_url=config.GITHUB_API_URL,
            timeout=config.GITHUB_TIMEOUT,
            max_attempts=config.STORE_MAX_ATTEMPTS,
            base_delay=config.GITHUB_RETRY_BASE_DELAY,
        )

    if backend == "local":
        logger.info(f"Comment store: local file {config.COMMENTS_FILE}")
        return LocalFileCommentStore(
            path=config.COMMENTS_FILE,
            max_attempts=config.STORE_MAX_ATTEMPTS,
            poll_interval=config.LOCAL_RETRY_INTERVAL,
            wait_timeout=config.LOCAL_WRITE_TIMEOUT,
        )

    raise ValueError(f"Unknown COMMENTS_BACKEND: {config.COMMENTS_BACKEND}")
