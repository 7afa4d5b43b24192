"""Optimistic-concurrency transactions over a single node.

The database has no multi-step transactions, only conditional PUT
(``If-Match: <etag>``). A transaction is therefore a loop:

1. Read the current value and its ETag
2. Apply the caller's update function
3. Try to write back conditioned on the ETag
4. On 412 the response already carries the latest value and ETag, so
   go back to step 2 with them instead of reading again

The update function may run several times per transaction and must not
depend on how often it is called.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from . import codec
from .adapter import Ok
from .context import CallContext
from .errors import TransactionAbortedError, TransactionExhaustedError

if TYPE_CHECKING:
    from .reference import Reference

logger = logging.getLogger(__name__)

MAX_TRANSACTION_ATTEMPTS = 25

UpdateFunction = Callable[[Any], Any]


def run_transaction(
    ref: "Reference",
    update_fn: UpdateFunction,
    ctx: CallContext | None = None,
    max_attempts: int = MAX_TRANSACTION_ATTEMPTS,
) -> Any:
    """Atomically replace the value at ``ref`` with ``update_fn(current)``.

    Args:
        ref: Node to update
        update_fn: Maps the current value to the new one; raising any
            exception aborts the transaction
        ctx: Deadline/cancellation context, checked before every request
        max_attempts: Maximum number of conditional writes

    Returns:
        The value that was written

    Raises:
        TransactionAbortedError: If ``update_fn`` raised (chained from it)
        TransactionExhaustedError: If every conditional write lost the race
        BackendError: If a read or write failed with an unexpected status
        NetworkError: On transport failure, cancellation or deadline expiry
    """
    path = str(ref.path)
    current, etag = ref.get_with_etag(ctx)

    for attempt in range(max_attempts):
        try:
            new_value = update_fn(current)
        except Exception as e:
            logger.debug(f"transaction on {path} aborted by update function: {e}")
            raise TransactionAbortedError(path, e) from e

        outcome = ref.compare_and_set(etag, new_value, ctx)
        if isinstance(outcome, Ok):
            logger.debug(f"transaction on {path} committed on attempt {attempt + 1}")
            return new_value

        fresh_etag = outcome.etag()
        if fresh_etag is None:
            # Conflict response without version info; read the node again
            logger.debug(f"conflict on {path} without ETag, re-reading")
            current, etag = ref.get_with_etag(ctx)
        else:
            current, etag = codec.decode(outcome.body), fresh_etag

        logger.debug(
            f"transaction conflict on {path}, attempt {attempt + 1}/{max_attempts}"
        )

    logger.warning(f"transaction on {path} gave up after {max_attempts} attempts")
    raise TransactionExhaustedError(path, max_attempts)
