# store/github_store.py
"""
GitHub Comment Store
Keeps the collection as a JSON file in a GitHub repository, read and written
through the contents API:

    GET /repos/{repo}/contents/{path}?ref={branch}   -> {"content": base64, "sha": ...}
    PUT /repos/{repo}/contents/{path}                -> {"content": {"sha": ...}}

The blob sha is the version token. PUT must carry the sha of the blob it
replaces; GitHub answers 409 (or 422 about the sha) when the file changed in
between, which is the conflict the base loop retries on. Other writers may
be other processes entirely, so the sha is always re-read before a write.

Files over 1 MB come back from the contents API with encoding "none" and no
inline content. Those are read from the git blob of the same sha, so the
content always matches the version token it is written back against.
"""

import base64
import binascii
import json
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from ..errors import CorruptStoreError, StorageUnavailableError
from .base import CommentRecords, CommentStore, InitResult, Snapshot, WriteResult

GITHUB_API_VERSION = "2022-11-28"


class GitHubCommentStore(CommentStore):
    """Comment collection stored in a GitHub-hosted JSON file"""

    name = "github"

    def __init__(
        self,
        repo: str,
        path: str,
        branch: str = "main",
        token: str = "",
        api_url: str = "https://api.github.com",
        timeout: float = 15.0,
        max_attempts: int = 4,
        base_delay: float = 0.2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(max_attempts=max_attempts, base_delay=base_delay)
        self.repo = repo
        self.path = path.lstrip("/")
        self.branch = branch
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def contents_url(self) -> str:
        return f"{self.api_url}/repos/{self.repo}/contents/{self.path}"

    def blob_url(self, sha: str) -> str:
        return f"{self.api_url}/repos/{self.repo}/git/blobs/{sha}"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": "wayfarer-backend",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ============================================
    # HTTP helpers
    # ============================================

    async def _request(self, method: str, url: Optional[str] = None, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url or self.contents_url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"GitHub {method} {self.repo}/{self.path} failed: {e!r}")
            raise StorageUnavailableError(detail=str(e) or type(e).__name__) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return str(response.json().get("message", ""))
        except ValueError:
            return response.text[:200]

    def _unavailable(self, action: str, response: httpx.Response) -> StorageUnavailableError:
        message = self._error_message(response)
        logger.error(f"GitHub {action} {self.repo}/{self.path} returned {response.status_code}: {message}")
        return StorageUnavailableError(detail=f"GitHub {action} returned HTTP {response.status_code}")

    def _is_conflict(self, response: httpx.Response) -> bool:
        if response.status_code == 409:
            return True
        if response.status_code == 422:
            return "sha" in self._error_message(response).lower()
        return False

    @staticmethod
    def _content_inline(payload: Dict[str, Any]) -> bool:
        if payload.get("encoding", "base64") != "base64":
            return False
        return bool(payload.get("content")) or not payload.get("size")

    @staticmethod
    def _decode(payload: Dict[str, Any]) -> CommentRecords:
        try:
            raw = base64.b64decode(payload.get("content") or "").decode("utf-8")
            data = json.loads(raw or "[]")
        except (binascii.Error, ValueError) as e:
            raise CorruptStoreError(detail=f"stored comments are not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise CorruptStoreError(detail=f"expected a JSON array, got {type(data).__name__}")
        return data

    @staticmethod
    def _encode(comments: CommentRecords) -> str:
        raw = json.dumps(comments, indent=2, ensure_ascii=False)
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def _put(self, comments: CommentRecords, sha: Optional[str], message: str) -> httpx.Response:
        body: Dict[str, Any] = {
            "message": message,
            "content": self._encode(comments),
            "branch": self.branch,
        }
        if sha:
            body["sha"] = sha
        return await self._request("PUT", json=body)

    async def _fetch_blob(self, sha: Optional[str]) -> Dict[str, Any]:
        if not sha:
            raise CorruptStoreError(detail=f"{self.path} has no inline content and no sha")
        response = await self._request("GET", url=self.blob_url(sha))
        if response.status_code != 200:
            raise self._unavailable("blob read", response)
        try:
            payload = response.json()
        except ValueError as e:
            raise CorruptStoreError(detail="GitHub returned a non-JSON blob payload") from e
        if not isinstance(payload, dict) or not self._content_inline(payload):
            raise CorruptStoreError(detail=f"blob {sha} has no base64 content")
        return payload

    # ============================================
    # CommentStore
    # ============================================

    async def read(self) -> Snapshot:
        response = await self._request("GET", params={"ref": self.branch})
        if response.status_code == 404:
            return Snapshot(comments=[], version=None)
        if response.status_code != 200:
            raise self._unavailable("read", response)

        try:
            payload = response.json()
        except ValueError as e:
            raise CorruptStoreError(detail="GitHub returned a non-JSON contents payload") from e
        if not isinstance(payload, dict):
            raise CorruptStoreError(detail=f"{self.path} is not a file")

        sha = payload.get("sha")
        if not self._content_inline(payload):
            logger.info(f"{self.path} ({payload.get('size')} bytes) is not inlined, reading blob {sha}")
            payload = await self._fetch_blob(sha)
        return Snapshot(comments=self._decode(payload), version=sha)

    async def write(self, comments: CommentRecords, expected_version: Optional[Any]) -> WriteResult:
        if not self.token:
            raise StorageUnavailableError(detail="GITHUB_TOKEN is not configured")

        response = await self._put(comments, expected_version, f"Update comments ({len(comments)} total)")
        if response.status_code in (200, 201):
            # Acknowledged; a garbled confirmation body does not undo the write
            try:
                new_sha = response.json().get("content", {}).get("sha")
            except (ValueError, AttributeError):
                new_sha = None
            return WriteResult.ok(new_sha)
        if self._is_conflict(response):
            logger.debug(f"GitHub write conflict on {self.path} (sha {expected_version})")
            return WriteResult.conflicted()
        raise self._unavailable("write", response)

    async def initialize(self) -> InitResult:
        if not self.token:
            return InitResult(created=False, reason="missing write credential")

        response = await self._request("GET", params={"ref": self.branch})
        if response.status_code == 200:
            return InitResult(created=False, reason="already exists")
        if response.status_code != 404:
            raise self._unavailable("read", response)

        response = await self._put([], None, "Initialize comments store")
        if response.status_code in (200, 201):
            logger.info(f"Created {self.repo}/{self.path} on {self.branch}")
            return InitResult(created=True, reason="created")
        if self._is_conflict(response):
            # Someone else created it between our GET and PUT
            return InitResult(created=False, reason="already exists")
        raise self._unavailable("initialize", response)
