from __future__ import annotations

from enum import StrEnum


class TransportErrorKind(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    NOT_FOUND = "NOT_FOUND"
    INVALID_RESPONSE = "INVALID_RESPONSE"


class TransportError(Exception):
    """Raised by the HTTP capability for every failed GET.

    Never crosses the ApiClient boundary. The client translates it into
    an ``ApiError`` or, for single-item lookups, a ``None`` result.
    """

    def __init__(
        self,
        kind: TransportErrorKind,
        message: str,
        status_code: int = 0,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


class ErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


class ApiError(Exception):
    """Raised by ApiClient for every failure it does not map to ``None``.

    Caught by DataStore and surfaced to observers as an error message.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
