"""HTTP transport used by the request adapter.

The adapter only needs something that performs one authenticated request
and hands back status, headers and raw body. ``HttpxTransport`` is the
production implementation; tests plug an ``httpx.MockTransport`` into it.
"""

import logging
from collections.abc import Generator, Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from .errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Raw HTTP response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


class Transport(Protocol):
    """Performs a single HTTP request."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        content: bytes | None = None,
        timeout: float | None = None,
    ) -> TransportResponse:
        """Send a request.

        Raises:
            NetworkError: On connection failures and timeouts. HTTP error
                statuses are returned, never raised.
        """
        ...

    def close(self) -> None:
        ...


class TokenAuth(httpx.Auth):
    """Adds an OAuth2 bearer token to every request."""

    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class HttpxTransport:
    """Transport backed by a pooled ``httpx.Client``."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        auth: httpx.Auth | None = None,
        timeout: float | None = 30.0,
    ):
        """Initialize transport.

        Args:
            client: Preconfigured client (owned by the caller); one is created if omitted
            auth: Authentication applied to every request
            timeout: Default per-request timeout in seconds
        """
        self._owns_client = client is None
        self._client = client or httpx.Client()
        self._auth = auth
        self.timeout = timeout

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        content: bytes | None = None,
        timeout: float | None = None,
    ) -> TransportResponse:
        merged = {"Accept": "application/json"}
        if content is not None:
            merged["Content-Type"] = "application/json"
        merged.update(headers or {})

        try:
            response = self._client.request(
                method,
                url,
                headers=merged,
                params=dict(params or {}),
                content=content,
                auth=self._auth or httpx.USE_CLIENT_DEFAULT,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"{method} {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        return TransportResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
