from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_FORMAT = "invalid_format"
    NOT_FOUND = "not_found"
    BLOCKED = "blocked"
    RATE_LIMITED = "rate_limited"
    NO_CONTENT = "no_content"
    NETWORK_ERROR = "network_error"


class IngestionError(Exception):
    """
    Base error for everything ingestion can fail with. The message is meant
    to be shown to the reader as-is.
    """

    kind: ErrorKind = ErrorKind.INVALID_FORMAT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFormatError(IngestionError):
    kind = ErrorKind.INVALID_FORMAT


class NotFoundError(IngestionError):
    kind = ErrorKind.NOT_FOUND


class BlockedError(IngestionError):
    kind = ErrorKind.BLOCKED


class RateLimitedError(IngestionError):
    kind = ErrorKind.RATE_LIMITED


class NoContentError(IngestionError):
    kind = ErrorKind.NO_CONTENT


class NetworkError(IngestionError):
    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
