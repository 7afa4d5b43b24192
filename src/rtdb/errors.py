"""Error types for rtdb."""


class RTDBError(Exception):
    """Base exception for rtdb errors."""
    pass


class ValidationError(RTDBError):
    """Malformed local input, detected before any network call."""
    pass


class ConfigError(RTDBError):
    """Configuration error."""
    pass


class NetworkError(RTDBError):
    """Transport-level failure (connection, timeout, cancellation)."""
    pass


class RequestCancelledError(NetworkError):
    """The caller's context was cancelled."""
    pass


class DeadlineExceededError(NetworkError):
    """The caller's context deadline passed."""
    pass


class BackendError(RTDBError):
    """The backend answered with a status the operation does not accept."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"http error status: {status}; reason: {message}")


class NotFoundError(BackendError):
    """The backend answered 404."""
    pass


class MalformedResponseError(RTDBError):
    """A response body could not be decoded into the expected shape."""
    pass


class TransactionAbortedError(RTDBError):
    """The update function declined to produce a new value."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"transaction on {path} aborted: {cause}")


class TransactionExhaustedError(RTDBError):
    """Raised when conditional write retries are exhausted."""

    def __init__(self, path: str, attempts: int):
        self.path = path
        self.attempts = attempts
        super().__init__(f"transaction on {path} failed after {attempts} attempts")
