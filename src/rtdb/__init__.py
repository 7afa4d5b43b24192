"""rtdb - client for a hierarchical JSON database served over HTTP."""

__version__ = "0.1.0"

from .client import Client
from .config import ClientConfig
from .context import CallContext
from .errors import (
    BackendError,
    ConfigError,
    DeadlineExceededError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    RequestCancelledError,
    RTDBError,
    TransactionAbortedError,
    TransactionExhaustedError,
    ValidationError,
)
from .paths import NodePath
from .reference import Reference
from .transaction import MAX_TRANSACTION_ATTEMPTS

__all__ = [
    "Client",
    "ClientConfig",
    "CallContext",
    "Reference",
    "NodePath",
    "MAX_TRANSACTION_ATTEMPTS",
    "RTDBError",
    "ValidationError",
    "ConfigError",
    "NetworkError",
    "RequestCancelledError",
    "DeadlineExceededError",
    "BackendError",
    "NotFoundError",
    "MalformedResponseError",
    "TransactionAbortedError",
    "TransactionExhaustedError",
    "__version__",
]
