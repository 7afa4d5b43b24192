"""Test configuration and shared fixtures for rtdb tests."""

import hashlib
import itertools
import json
import threading
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from rtdb.client import Client
from rtdb.config import ClientConfig
from rtdb.transport import HttpxTransport

DATABASE_URL = "https://test-db.example.com"


class StubBackend:
    """Scripted backend: answers queued responses in order and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._queue: list[httpx.Response | Callable[[httpx.Request], httpx.Response]] = []
        self.fallback: tuple[int, bytes, dict[str, str]] | None = None

    def respond(
        self,
        status: int,
        body: Any = None,
        headers: dict[str, str] | None = None,
        raw: bytes | None = None,
    ) -> "StubBackend":
        if raw is None:
            raw = b"" if body is None else json.dumps(body).encode()
        self._queue.append(httpx.Response(status, content=raw, headers=headers or {}))
        return self

    def respond_with(self, fn: Callable[[httpx.Request], httpx.Response]) -> "StubBackend":
        self._queue.append(fn)
        return self

    def always(self, status: int, body: Any = None, headers: dict[str, str] | None = None):
        self.fallback = (status, json.dumps(body).encode(), headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._queue:
            item = self._queue.pop(0)
            return item(request) if callable(item) else item
        if self.fallback is not None:
            status, raw, headers = self.fallback
            return httpx.Response(status, content=raw, headers=headers)
        raise AssertionError(f"unexpected request: {request.method} {request.url}")

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]

    def count(self, method: str) -> int:
        return self.methods().count(method)


class FakeDatabase:
    """In-memory tree database speaking the REST protocol.

    ETags are content hashes of the node value, so they are naturally
    scoped to one path. Thread-safe like the real backend: conditional
    writes compare and store under one lock.
    """

    def __init__(self):
        self._root: Any = None
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.requests: list[httpx.Request] = []

    @staticmethod
    def etag_of(value: Any) -> str:
        digest = hashlib.sha1(json.dumps(value, sort_keys=True).encode()).hexdigest()
        return f'"{digest}"'

    def _segments(self, request: httpx.Request) -> list[str]:
        path = request.url.path
        if path.endswith(".json"):
            path = path[: -len(".json")]
        return [seg for seg in path.split("/") if seg]

    def read(self, segments: list[str]) -> Any:
        node = self._root
        for seg in segments:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node

    def write(self, segments: list[str], value: Any) -> None:
        if not segments:
            self._root = value
            return
        if not isinstance(self._root, dict):
            self._root = {}
        node = self._root
        for seg in segments[:-1]:
            if not isinstance(node.get(seg), dict):
                node[seg] = {}
            node = node[seg]
        if value is None:
            node.pop(segments[-1], None)
        else:
            node[segments[-1]] = value

    def _json(self, status: int, value: Any, headers: dict | None = None) -> httpx.Response:
        return httpx.Response(status, content=json.dumps(value).encode(), headers=headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        segments = self._segments(request)
        silent = request.url.params.get("print") == "silent"
        body = json.loads(request.content) if request.content else None

        with self._lock:
            current = self.read(segments)
            etag = self.etag_of(current)

            if request.method == "GET":
                if request.headers.get("If-None-Match") == etag:
                    return httpx.Response(304, headers={"ETag": etag})
                wants_etag = request.headers.get("X-Firebase-ETag") or request.headers.get(
                    "If-None-Match"
                )
                headers = {"ETag": etag} if wants_etag else {}
                return self._json(200, current, headers)

            if request.method == "PUT":
                expected = request.headers.get("If-Match")
                if expected is not None and expected != etag:
                    return self._json(412, current, {"ETag": etag})
                self.write(segments, body)
                if silent:
                    return httpx.Response(204)
                return self._json(200, body, {"ETag": self.etag_of(body)})

            if request.method == "POST":
                key = f"-N{next(self._ids):06d}"
                self.write(segments + [key], body)
                return self._json(200, {"name": key})

            if request.method == "PATCH":
                for child, value in body.items():
                    self.write(segments + [s for s in child.split("/") if s], value)
                return httpx.Response(204) if silent else self._json(200, body)

            if request.method == "DELETE":
                self.write(segments, None)
                return self._json(200, None)

        return self._json(405, {"error": "method not allowed"})


def make_client(handler: Callable[[httpx.Request], httpx.Response], **overrides) -> Client:
    config = ClientConfig(database_url=DATABASE_URL, **overrides)
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return Client(config, transport=HttpxTransport(http))


@pytest.fixture
def backend():
    """Provide a fresh scripted backend for each test."""
    return StubBackend()


@pytest.fixture
def client(backend):
    """Client wired to the scripted backend."""
    with make_client(backend.handler) as c:
        yield c


@pytest.fixture
def database():
    """Provide a clean fake database for each test."""
    return FakeDatabase()


@pytest.fixture
def db_client(database):
    """Client wired to the fake database."""
    with make_client(database.handler) as c:
        yield c


@pytest.fixture
def client_factory():
    """Build clients around arbitrary request handlers."""
    return make_client
