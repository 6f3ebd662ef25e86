# store/local_store.py
"""
Local File Comment Store
Keeps the collection in one JSON file private to this process.

The version token is an in-process generation counter bumped on every
successful write. Writers take the WriteGuard, a mutual-exclusion flag
acquired by polling on a short fixed interval until a deadline, and hold it
for the whole read-mutate-write cycle. In-process writers therefore queue
behind each other instead of conflicting. File I/O runs in a worker thread
and never blocks the event loop.
"""

import asyncio
import copy
import json
import os
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from ..errors import CorruptStoreError, StorageConflictError, StorageUnavailableError
from .base import CommentRecords, CommentStore, InitResult, Mutator, Snapshot, WriteResult


class WriteGuard:
    """Single-writer flag with bounded poll-wait acquisition"""

    def __init__(self, interval: float = 0.03, timeout: float = 5.0):
        self.interval = interval
        self.timeout = timeout
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    async def acquire(self) -> bool:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        while self._held:
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(self.interval)
        self._held = True
        return True

    def release(self):
        self._held = False


class LocalFileCommentStore(CommentStore):
    """
    Comment collection persisted to a local JSON file.

    Owns the in-memory cache; only the write path mutates it, under the guard.
    """

    name = "local"

    def __init__(
        self,
        path: str,
        max_attempts: int = 4,
        poll_interval: float = 0.03,
        wait_timeout: float = 5.0,
    ):
        super().__init__(max_attempts=max_attempts, base_delay=poll_interval)
        self.path = Path(path)
        self.guard = WriteGuard(interval=poll_interval, timeout=wait_timeout)
        self._cache: Optional[CommentRecords] = None
        self._generation = 0

    # ============================================
    # File helpers (run in a worker thread)
    # ============================================

    def _load_file(self) -> Optional[CommentRecords]:
        if not self.path.exists():
            return None
        raw = self.path.read_text(encoding="utf-8")
        data = json.loads(raw or "[]")
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return data

    def _dump_file(self, comments: CommentRecords):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(comments, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def _load(self) -> CommentRecords:
        try:
            data = await asyncio.to_thread(self._load_file)
        except ValueError as e:
            logger.error(f"Comments file {self.path} is corrupt: {e}")
            raise CorruptStoreError(detail=str(e)) from e
        except OSError as e:
            logger.error(f"Cannot read comments file {self.path}: {e}")
            raise StorageUnavailableError(detail=str(e)) from e
        return data if data is not None else []

    # ============================================
    # CommentStore
    # ============================================

    async def read(self) -> Snapshot:
        if self._cache is None:
            loaded = await self._load()
            # A write may have filled the cache while the file was loading
            if self._cache is None:
                self._cache = loaded
        return Snapshot(comments=list(self._cache), version=self._generation)

    async def list_snapshot(self) -> Snapshot:
        # Stale reads are fine for listing
        return await self.read()

    async def _acquire_guard(self):
        if not await self.guard.acquire():
            logger.error(f"Gave up waiting {self.guard.timeout}s for the write guard on {self.path}")
            raise StorageConflictError(detail="timed out waiting for the local write guard")

    async def _write_held(self, comments: CommentRecords, expected_version: Optional[Any]) -> WriteResult:
        if expected_version != self._generation:
            return WriteResult.conflicted()
        try:
            await asyncio.to_thread(self._dump_file, comments)
        except OSError as e:
            logger.error(f"Failed to write comments file {self.path}: {e}")
            raise StorageUnavailableError(detail=str(e)) from e
        self._cache = list(comments)
        self._generation += 1
        return WriteResult.ok(self._generation)

    async def write(self, comments: CommentRecords, expected_version: Optional[Any]) -> WriteResult:
        await self._acquire_guard()
        try:
            return await self._write_held(comments, expected_version)
        finally:
            self.guard.release()

    async def mutate(self, mutator: Mutator) -> CommentRecords:
        """
        Read, apply mutator and write while holding the guard.

        The generation cannot move while the guard is held, so a write from
        this process never conflicts; waiting writers are served in turn.

        Raises:
            StorageConflictError: The guard was not free within wait_timeout
        """
        await self._acquire_guard()
        try:
            snapshot = await self.read()
            candidate = mutator(copy.deepcopy(snapshot.comments))
            result = await self._write_held(candidate, snapshot.version)
        finally:
            self.guard.release()
        if not result.success:
            raise StorageConflictError(detail="local generation moved while the guard was held")
        return candidate

    async def initialize(self) -> InitResult:
        await self._acquire_guard()
        try:
            exists = await asyncio.to_thread(self.path.exists)
            if exists:
                return InitResult(created=False, reason="already exists")
            try:
                await asyncio.to_thread(self._dump_file, [])
            except OSError as e:
                logger.warning(f"Cannot initialize comments file {self.path}: {e}")
                return InitResult(created=False, reason=f"cannot create store: {e.strerror or e}")
            self._cache = []
            self._generation += 1
            logger.info(f"Initialized empty comments file at {self.path}")
            return InitResult(created=True, reason="created")
        finally:
            self.guard.release()
