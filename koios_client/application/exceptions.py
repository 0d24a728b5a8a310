"""
Error taxonomy for the Koios client.

Every error raised by the library carries an ErrorKind. Callers branch on
the kind (``err.is_(ErrorKind.NO_ADDRESS)``) instead of comparing messages,
and the hierarchy below separates failure domains the same way: bad
configuration, bad caller input, and failures talking to the API.
"""

import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """Closed set of error kinds. The value is the message prefix."""

    # --- Configuration ---
    INVALID_SCHEME = "scheme must be http or https"
    INVALID_HOST = "host must not be empty"
    INVALID_PORT = "port must be between 1-65535"
    INVALID_API_VERSION = "api version must not be empty"
    RATE_LIMIT_RANGE = "rate limit must be between 1-255 requests per sec"
    INVALID_ORIGIN = "origin must be an absolute url"
    ORIGIN_CHANGE = "origin can only be set when the client is constructed"
    HTTP_CLIENT_CHANGE = "http client can only be set when the client is constructed"
    HTTP_CLIENT_TIMEOUT = "http client timeout should never be disabled"

    # --- Caller input ---
    NO_ADDRESS = "missing address"
    NO_STAKE_ADDRESS = "missing stake address"
    NO_CREDENTIAL = "missing payment credential"
    NO_TX_HASH = "missing transaction hash(es)"
    NO_BLOCK_HASH = "missing block hash(es)"
    NO_POOL_ID = "missing pool id"
    NO_SCRIPT_HASH = "missing script hash"
    NO_DATUM_HASH = "missing datum hash"
    NO_ASSET = "missing asset policy"
    INVALID_TX_BODY = "invalid signed transaction"
    REQUEST_OPTIONS_USED = "request options already used"
    INVALID_PAGINATION = "page and page size must be positive"
    INVALID_ARGUMENT = "invalid argument"

    # --- Talking to the API ---
    TRANSPORT = "transport error"
    CANCELLED = "request cancelled or deadline exceeded"
    RESPONSE = "got unexpected response"
    RESPONSE_NOT_JSON = "got non json response"
    DECODE = "failed to decode response"

    # --- Result shape ---
    NO_DATA = "no data found"
    TOO_MANY_RESULTS = "expected exactly one result"


_RETRYABLE = frozenset({ErrorKind.TRANSPORT, ErrorKind.CANCELLED})


class KoiosError(Exception):
    """Base exception for all client errors."""

    default_kind = ErrorKind.RESPONSE

    def __init__(self, kind: Optional[ErrorKind] = None, detail: str = ""):
        self.kind = kind or self.default_kind
        self.detail = detail
        message = self.kind.value
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def is_(self, kind: ErrorKind) -> bool:
        """Report whether this error, or any error it wraps, is ``kind``."""
        seen = set()
        err: Optional[BaseException] = self
        while err is not None and id(err) not in seen:
            seen.add(id(err))
            if getattr(err, "kind", None) is kind:
                return True
            err = err.__cause__
        return False

    @property
    def retryable(self) -> bool:
        """Whether repeating the same call could plausibly succeed."""
        return any(self.is_(kind) for kind in _RETRYABLE)


# --- Configuration Errors ---

class ConfigurationError(KoiosError):
    """Raised when a client option is invalid or applied at the wrong time."""

    default_kind = ErrorKind.INVALID_SCHEME


# --- Domain Errors ---

class DomainError(KoiosError):
    """Base class for errors caused by how the client is called."""
    pass


class ValidationError(DomainError):
    """Raised before dispatch when a required identifier is missing."""

    default_kind = ErrorKind.NO_ADDRESS


class RequestOptionsError(DomainError):
    """Raised when request options are reused or given invalid values."""

    default_kind = ErrorKind.REQUEST_OPTIONS_USED


class DataShapeError(DomainError):
    """Raised when a single-item accessor does not get exactly one result."""

    default_kind = ErrorKind.NO_DATA


# --- Infrastructure Errors ---

class InfrastructureError(KoiosError):
    """Base class for errors talking to the Koios API."""
    pass


class TransportError(InfrastructureError):
    """Raised when the server could not be reached (DNS, TLS, connection)."""

    default_kind = ErrorKind.TRANSPORT


class DeadlineExceededError(InfrastructureError):
    """Raised when a call does not finish before its deadline."""

    default_kind = ErrorKind.CANCELLED


class ProtocolError(InfrastructureError):
    """Raised when the server answered, but not with a usable response."""

    default_kind = ErrorKind.RESPONSE


class DecodeError(InfrastructureError):
    """Raised when a successful response body does not match its model."""

    default_kind = ErrorKind.DECODE
