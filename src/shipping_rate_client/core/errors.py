from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence


class ErrorKind(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"


class ConfigError(Exception):
    """Raised at startup when required settings are missing or invalid."""


class CarrierError(Exception):
    """Base class for classified carrier failures."""

    kind: ErrorKind

    def __init__(
        self, message: str, status_code: Optional[int] = None, payload: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class AuthError(CarrierError):
    """Raised when the carrier rejects our credentials or token."""

    kind = ErrorKind.AUTH

    def __init__(self, message: str, status_code: Optional[int] = 401, payload: Any = None) -> None:
        super().__init__(message, status_code=status_code, payload=payload)


class RateLimitError(CarrierError):
    """Raised when requests are rate-limited."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self, message: str, retry_after: Optional[float] = None, payload: Any = None
    ) -> None:
        super().__init__(message, status_code=429, payload=payload)
        self.retry_after = retry_after


class RequestTimeoutError(CarrierError):
    """Raised when a carrier endpoint does not answer within its timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message, status_code=None, payload=payload)


class BadRequestError(CarrierError):
    """Raised for rejected input, 4xx responses, and payloads we cannot normalize."""

    kind = ErrorKind.BAD_REQUEST

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 400,
        payload: Any = None,
        fields: Sequence[str] = (),
        index: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, payload=payload)
        self.fields = list(fields)
        self.index = index


class ServerError(CarrierError):
    """Raised when the carrier answers with a 5xx status."""

    kind = ErrorKind.SERVER_ERROR
