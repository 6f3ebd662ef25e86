# store/base.py
"""
Comment Store Interface
Shared optimistic-concurrency write loop for every backing store.

A write is: read a fresh snapshot, apply a pure mutator, write the candidate
back conditioned on the snapshot's version token. A version mismatch is a
conflict and the whole cycle is repeated against a fresh read, with linear
backoff, up to max_attempts. Any other failure propagates immediately.
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from ..errors import StorageConflictError, StorageUnavailableError

CommentRecords = List[Dict[str, Any]]
Mutator = Callable[[CommentRecords], CommentRecords]

DEFAULT_MAX_ATTEMPTS = 4


@dataclass
class Snapshot:
    """Comments as read at one point in time, plus the store's version token"""
    comments: CommentRecords = field(default_factory=list)
    version: Optional[Any] = None


@dataclass
class WriteResult:
    success: bool
    conflict: bool = False
    version: Optional[Any] = None

    @classmethod
    def ok(cls, version: Any = None) -> "WriteResult":
        return cls(success=True, version=version)

    @classmethod
    def conflicted(cls) -> "WriteResult":
        return cls(success=False, conflict=True)


@dataclass
class InitResult:
    created: bool
    reason: str


class CommentStore(ABC):
    """
    Backing store for the comment collection.

    Subclasses implement read/write/initialize; mutate() is the retry loop.
    """

    name = "base"

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS, base_delay: float = 0.2):
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    @abstractmethod
    async def read(self) -> Snapshot:
        """Fresh snapshot. A missing store reads as empty with version None."""

    @abstractmethod
    async def write(self, comments: CommentRecords, expected_version: Optional[Any]) -> WriteResult:
        """Conditional write; returns a conflict result on version mismatch."""

    @abstractmethod
    async def initialize(self) -> InitResult:
        """Create an empty collection if none exists. Idempotent."""

    async def list_snapshot(self) -> Snapshot:
        """Snapshot for read-only listing; may be served from a cache."""
        return await self.read()

    async def close(self):
        pass

    def backoff(self, attempt: int) -> float:
        return self.base_delay * attempt

    async def mutate(self, mutator: Mutator) -> CommentRecords:
        """
        Apply mutator to the stored collection with optimistic concurrency.

        Args:
            mutator: Pure function from the current records to the new records.
                It may raise (e.g. not found) to abort without writing.

        Returns:
            The records that were written

        Raises:
            StorageConflictError: Still conflicting after max_attempts
        """
        attempt = 0
        while True:
            attempt += 1
            snapshot = await self.read()
            candidate = mutator(copy.deepcopy(snapshot.comments))
            result = await self.write(candidate, expected_version=snapshot.version)

            if result.success:
                if attempt > 1:
                    logger.info(f"[{self.name}] write succeeded on attempt {attempt}")
                return candidate

            if not result.conflict:
                raise StorageUnavailableError(detail="store rejected the write")

            if attempt >= self.max_attempts:
                logger.error(f"[{self.name}] giving up after {attempt} conflicting attempts")
                raise StorageConflictError(detail=f"exhausted retries under contention ({attempt} attempts)")

            delay = self.backoff(attempt)
            logger.warning(f"[{self.name}] version conflict on attempt {attempt}, retrying in {delay:.2f}s")
            await asyncio.sleep(delay)
