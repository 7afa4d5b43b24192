"""References: handles bound to one node of the database tree.

A ``Reference`` carries no mutable state. Everything an operation needs
(current value, ETag) lives on the call stack, so a single Reference can be
shared freely between threads.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from . import codec
from .adapter import (
    HTTP_NO_CONTENT,
    HTTP_OK,
    NotModified,
    Ok,
    PreconditionFailed,
    Request,
    backend_message,
)
from .context import CallContext
from .errors import BackendError, MalformedResponseError, ValidationError
from .paths import NodePath
from .transaction import UpdateFunction, run_transaction

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

ETAG_REQUEST_HEADER = "X-Firebase-ETag"
SILENT = {"print": "silent"}


def _require_ok(outcome: Any, expect: int) -> Ok:
    """Treat 304/412 as plain backend errors for operations that never send conditions."""
    if isinstance(outcome, Ok):
        return outcome
    if isinstance(outcome, PreconditionFailed):
        raise BackendError(412, backend_message(outcome.body))
    raise BackendError(304, f"unexpected not-modified response (expected {expect})")


@dataclass(frozen=True)
class Reference:
    """Addressable handle for one database node.

    Two references are equal when they address the same canonical path.
    """

    client: "Client" = field(compare=False, repr=False)
    path: NodePath

    @property
    def key(self) -> str | None:
        """Last path segment; None for the root."""
        return self.path.key

    @property
    def parent(self) -> "Reference | None":
        parent = self.path.parent()
        if parent is None:
            return None
        return Reference(self.client, parent)

    def child(self, path: str) -> "Reference":
        """Reference to a descendant node.

        Raises:
            ValidationError: If ``path`` starts with "/" or is empty
        """
        return Reference(self.client, self.path.child(path))

    def _send(self, method: str, expect: int, ctx: CallContext | None, **kwargs):
        return self.client.adapter.send(Request(method, self.path, **kwargs), expect, ctx)

    # ---- reads ----

    def get(self, ctx: CallContext | None = None, as_type: Any = None) -> Any:
        """Read the value at this node.

        Args:
            ctx: Deadline/cancellation context
            as_type: Optional type (e.g. a pydantic model) to validate the value against

        Returns:
            Decoded value; None when the node does not exist

        Raises:
            BackendError: On any non-200 response
        """
        outcome = self._send("GET", HTTP_OK, ctx)
        return codec.decode(_require_ok(outcome, HTTP_OK).body, as_type)

    def get_with_etag(
        self, ctx: CallContext | None = None, as_type: Any = None
    ) -> tuple[Any, str]:
        """Read the value together with its current ETag.

        Returns:
            Tuple of (value, etag)
        """
        outcome = self._send("GET", HTTP_OK, ctx, headers={ETAG_REQUEST_HEADER: "true"})
        ok = _require_ok(outcome, HTTP_OK)
        etag = ok.etag()
        if etag is None:
            raise MalformedResponseError(f"no ETag in response for {self.path}")
        return codec.decode(ok.body, as_type), etag

    def get_if_changed(
        self, etag: str, ctx: CallContext | None = None, as_type: Any = None
    ) -> tuple[bool, Any, str]:
        """Read the value only if it changed since ``etag`` was observed.

        Returns:
            ``(True, value, new_etag)`` if the value changed, otherwise
            ``(False, None, etag)`` with the ETag passed in.
        """
        outcome = self._send("GET", HTTP_OK, ctx, headers={"If-None-Match": etag})
        if isinstance(outcome, NotModified):
            return False, None, etag
        ok = _require_ok(outcome, HTTP_OK)
        new_etag = ok.etag()
        if new_etag is None:
            raise MalformedResponseError(f"no ETag in response for {self.path}")
        return True, codec.decode(ok.body, as_type), new_etag

    # ---- writes ----

    def set(self, value: Any, ctx: CallContext | None = None) -> None:
        """Overwrite the value at this node."""
        outcome = self._send("PUT", HTTP_NO_CONTENT, ctx, body=value, params=SILENT)
        _require_ok(outcome, HTTP_NO_CONTENT)

    def set_if_unchanged(self, etag: str, value: Any, ctx: CallContext | None = None) -> bool:
        """Overwrite the value only if its ETag still equals ``etag``.

        Returns:
            True if written, False if someone else wrote first.
        """
        outcome = self.compare_and_set(etag, value, ctx)
        return isinstance(outcome, Ok)

    def compare_and_set(
        self, etag: str, value: Any, ctx: CallContext | None = None
    ) -> Ok | PreconditionFailed:
        """Conditional PUT with ``If-Match``; returns the raw outcome."""
        outcome = self._send("PUT", HTTP_OK, ctx, body=value, headers={"If-Match": etag})
        if isinstance(outcome, NotModified):
            raise BackendError(304, "unexpected not-modified response to conditional write")
        return outcome

    def push(self, value: Any = None, ctx: CallContext | None = None) -> "Reference":
        """Create a child with a backend-generated key.

        Returns:
            Reference to the new child
        """
        body = "" if value is None else value
        outcome = self._send("POST", HTTP_OK, ctx, body=body)
        payload = codec.decode(_require_ok(outcome, HTTP_OK).body)
        name = payload.get("name") if isinstance(payload, dict) else None
        if not isinstance(name, str) or not name:
            raise MalformedResponseError(f"push to {self.path} returned no generated key")
        logger.debug(f"pushed new child {name} under {self.path}")
        return self.child(name)

    def update(self, values: Mapping[str, Any], ctx: CallContext | None = None) -> None:
        """Merge ``values`` (child key to value) into this node.

        Raises:
            ValidationError: If ``values`` is empty
        """
        if not values:
            raise ValidationError("value argument must be a non-empty map")
        outcome = self._send("PATCH", HTTP_NO_CONTENT, ctx, body=dict(values), params=SILENT)
        _require_ok(outcome, HTTP_NO_CONTENT)

    def delete(self, ctx: CallContext | None = None) -> None:
        """Remove this node and everything below it."""
        outcome = self._send("DELETE", HTTP_OK, ctx)
        _require_ok(outcome, HTTP_OK)

    def transaction(self, update_fn: UpdateFunction, ctx: CallContext | None = None) -> Any:
        """Atomically replace the value with ``update_fn(current)``.

        See ``rtdb.transaction.run_transaction``.

        Returns:
            The value that was written
        """
        return run_transaction(
            self, update_fn, ctx, max_attempts=self.client.config.max_transaction_attempts
        )

    def __str__(self) -> str:
        return str(self.path)
