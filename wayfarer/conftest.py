"""Shared pytest fixtures: an in-memory GitHub contents API"""

import asyncio
import base64
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest


class FakeGitHub:
    """
    Minimal GitHub contents endpoint for one file, plus its git blobs.

    hold_reads: the first N GETs answer only once N of them have arrived, all
    with the version they saw on arrival. Used to force concurrent writers to
    start from the same sha.

    large_file: contents GETs answer the way GitHub does for files over 1 MB,
    with encoding "none" and empty content; the bytes are only available from
    /git/blobs/{sha}.
    """

    def __init__(self, comments: Optional[List[Any]] = None, hold_reads: int = 0, large_file: bool = False):
        self.content: Optional[bytes] = None
        self.version = 0
        self.sha: Optional[str] = None
        self.blobs: Dict[str, bytes] = {}
        if comments is not None:
            self._store(json.dumps(comments).encode("utf-8"))

        self.hold_reads = hold_reads
        self.reads = 0
        self._gate = asyncio.Event() if hold_reads else None
        self.large_file = large_file
        self.blob_reads = 0

        self.puts: List[dict] = []
        self.conflicts = 0
        self.put_status: Optional[int] = None
        self.get_status: Optional[int] = None
        self.blob_status: Optional[int] = None

    def _store(self, raw: bytes):
        self.content = raw
        self.version += 1
        self.sha = f"sha-{self.version}"
        self.blobs[self.sha] = raw

    def set_raw(self, raw: bytes):
        self._store(raw)

    @property
    def comments(self) -> List[Any]:
        return json.loads(self.content.decode("utf-8"))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if "/git/blobs/" in request.url.path:
            return self._get_blob(request.url.path.rsplit("/", 1)[-1])
        if request.method == "GET":
            return await self._get()
        if request.method == "PUT":
            return self._put(json.loads(request.content))
        return httpx.Response(405, json={"message": "Method Not Allowed"})

    async def _get(self) -> httpx.Response:
        if self.get_status:
            return httpx.Response(self.get_status, json={"message": "Bad credentials"})

        content, sha = self.content, self.sha
        self.reads += 1
        if self._gate is not None and self.reads <= self.hold_reads:
            if self.reads == self.hold_reads:
                self._gate.set()
            await self._gate.wait()

        if content is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if self.large_file:
            return httpx.Response(200, json={
                "type": "file",
                "encoding": "none",
                "content": "",
                "size": len(content),
                "sha": sha,
            })
        return httpx.Response(200, json={
            "type": "file",
            "encoding": "base64",
            "content": base64.encodebytes(content).decode("ascii"),
            "size": len(content),
            "sha": sha,
        })

    def _get_blob(self, sha: str) -> httpx.Response:
        self.blob_reads += 1
        if self.blob_status:
            return httpx.Response(self.blob_status, json={"message": "Server Error"})
        if sha not in self.blobs:
            return httpx.Response(404, json={"message": "Not Found"})
        raw = self.blobs[sha]
        return httpx.Response(200, json={
            "sha": sha,
            "size": len(raw),
            "encoding": "base64",
            "content": base64.encodebytes(raw).decode("ascii"),
        })

    def _put(self, body: dict) -> httpx.Response:
        self.puts.append(body)
        if self.put_status:
            return httpx.Response(self.put_status, json={"message": "Resource not accessible by integration"})

        if self.content is not None and not body.get("sha"):
            self.conflicts += 1
            return httpx.Response(422, json={"message": "Invalid request.\n\n\"sha\" wasn't supplied."})
        if self.content is not None and body["sha"] != self.sha:
            self.conflicts += 1
            return httpx.Response(409, json={"message": f"data/comments.json does not match {body['sha']}"})

        created = self.content is None
        self._store(base64.b64decode(body["content"]))
        return httpx.Response(201 if created else 200, json={"content": {"sha": self.sha}})


@pytest.fixture
def fake_github_factory():
    return FakeGitHub
