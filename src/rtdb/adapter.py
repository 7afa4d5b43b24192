"""Request/response adapter between References and the HTTP transport.

Translates a node-level request into one HTTP call and classifies the
response into a typed outcome. No retries happen here; the transaction
engine is the only place that loops.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from . import codec
from .context import CallContext
from .errors import BackendError, DeadlineExceededError, NetworkError, NotFoundError
from .paths import NodePath
from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_NO_CONTENT = 204
HTTP_NOT_MODIFIED = 304
HTTP_NOT_FOUND = 404
HTTP_PRECONDITION_FAILED = 412

ETAG_HEADER = "ETag"


class _NoBody:
    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY = _NoBody()


@dataclass(frozen=True)
class Request:
    """One operation against a node."""

    method: str
    path: NodePath
    body: Any = NO_BODY
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Ok:
    """Status matched what the operation expects."""

    body: bytes
    headers: Mapping[str, str]

    def etag(self) -> str | None:
        return _header(self.headers, ETAG_HEADER)


@dataclass(frozen=True)
class PreconditionFailed:
    """HTTP 412: the ETag no longer matches; body and ETag describe current state."""

    body: bytes
    headers: Mapping[str, str]

    def etag(self) -> str | None:
        return _header(self.headers, ETAG_HEADER)


@dataclass(frozen=True)
class NotModified:
    """HTTP 304 answer to a conditional GET."""

    headers: Mapping[str, str]


Outcome = Ok | PreconditionFailed | NotModified


def _header(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def backend_message(body: bytes) -> str:
    """Extract the backend's error message from a response body.

    The database reports failures as ``{"error": "..."}``; anything else is
    returned verbatim.
    """
    text = body.decode("utf-8", errors="replace").strip()
    try:
        payload = json.loads(text)
    except ValueError:
        return text or "<empty response>"
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return text


class RequestAdapter:
    """Sends node requests to ``<base_url><path>.json``."""

    def __init__(self, transport: Transport, base_url: str, timeout: float | None = None):
        """Initialize adapter.

        Args:
            transport: HTTP transport
            base_url: Database URL, e.g. https://my-db.firebaseio.com
            timeout: Default per-request timeout in seconds
        """
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, path: NodePath) -> str:
        if path.is_root:
            return f"{self.base_url}/.json"
        return f"{self.base_url}{path}.json"

    def send(self, request: Request, expect: int, ctx: CallContext | None = None) -> Outcome:
        """Perform a request and classify the response.

        Args:
            request: Request to send
            expect: Status code meaning success for this operation
            ctx: Deadline/cancellation context

        Returns:
            ``Ok``, ``PreconditionFailed`` (412) or ``NotModified`` (304)

        Raises:
            NotFoundError: On 404 when 404 is not expected
            BackendError: On any other unexpected status
            NetworkError: On transport failure, cancellation or deadline expiry
        """
        ctx = ctx or CallContext.background()
        ctx.check()

        url = self.url_for(request.path)
        content = None if request.body is NO_BODY else codec.encode(request.body)

        try:
            response = self.transport.request(
                request.method,
                url,
                headers=request.headers,
                params=request.params,
                content=content,
                timeout=ctx.timeout(self.timeout),
            )
        except NetworkError as e:
            if ctx.expired:
                raise DeadlineExceededError(f"{request.method} {url}: deadline exceeded") from e
            raise

        logger.debug(f"{request.method} {url} -> {response.status}")
        return self._classify(request, url, response, expect)

    def _classify(
        self, request: Request, url: str, response: TransportResponse, expect: int
    ) -> Outcome:
        if response.status == expect:
            return Ok(response.body, response.headers)
        if response.status == HTTP_PRECONDITION_FAILED:
            return PreconditionFailed(response.body, response.headers)
        if response.status == HTTP_NOT_MODIFIED:
            return NotModified(response.headers)

        message = backend_message(response.body)
        logger.debug(f"unexpected response to {request.method} {url}: {response.status} {message}")
        if response.status == HTTP_NOT_FOUND:
            raise NotFoundError(response.status, message)
        raise BackendError(response.status, message)
