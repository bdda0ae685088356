"""
Bunny Database HTTP client exceptions.

Custom exception hierarchy for the client. Statement-level SQL errors inside a
batch are not exceptions; they are returned as ``SqlError`` outcomes.
"""

from enum import Enum

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class BunnyDbError(Exception):
    """Base exception for all Bunny Database client errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportErrorKind(str, Enum):
    """Classification of failures below the protocol layer."""

    TIMEOUT = "timeout"
    CONNECT = "connect"
    REQUEST = "request"
    BODY = "body"
    OTHER = "other"


class TransportError(BunnyDbError):
    """Raised when the HTTP round trip itself fails (network, timeout, body read)."""

    def __init__(
        self,
        message: str,
        kind: TransportErrorKind = TransportErrorKind.OTHER,
        cause: BaseException | None = None,
    ):
        self.kind = kind
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        return f"transport error: {self.message}"

    @property
    def is_timeout(self) -> bool:
        """Check if the attempt ran out of time."""
        return self.kind is TransportErrorKind.TIMEOUT

    @property
    def is_retryable(self) -> bool:
        """Check if the failure is transient and worth another attempt."""
        return self.kind is not TransportErrorKind.OTHER


class HttpError(BunnyDbError):
    """Raised when the pipeline endpoint answers with a non-2xx status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"http error {status}: {body}")

    @property
    def is_retryable(self) -> bool:
        """Check if the status code is one of the transient server answers."""
        return self.status in RETRYABLE_STATUS_CODES


class PipelineError(BunnyDbError):
    """Raised when the server reports an error result for a request the call depends on."""

    def __init__(self, request_index: int, message: str, code: str | None = None):
        self.request_index = request_index
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        return f"pipeline error at request {self.request_index}: {self.message}"


class DecodeError(BunnyDbError):
    """Raised when a value cannot be encoded or a response cannot be decoded."""

    def __str__(self) -> str:
        return f"decode error: {self.message}"


class ConfigurationError(BunnyDbError):
    """Raised when client credentials cannot be loaded."""

    pass
