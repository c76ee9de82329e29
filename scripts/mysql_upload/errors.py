"""
Upload error taxonomy and the result type returned at the call boundary.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories reported by an upload."""
    ARGUMENT = "argument"
    STAGING = "staging"
    CONNECTION = "connection"
    QUERY = "query"
    UNSUPPORTED = "unsupported"


class UploadError(Exception):
    """Base class for failures raised inside an upload."""
    kind: ErrorKind = ErrorKind.ARGUMENT


class ArgumentError(UploadError):
    kind = ErrorKind.ARGUMENT


class StagingError(UploadError):
    kind = ErrorKind.STAGING


class DatabaseConnectionError(UploadError):
    kind = ErrorKind.CONNECTION


class QueryError(UploadError):
    kind = ErrorKind.QUERY


class UnsupportedError(UploadError):
    kind = ErrorKind.UNSUPPORTED


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of one upload call.

    Truthy on success. ``rows`` is the affected-row count reported by the
    server; ``error`` and ``message`` are set on failure.
    """
    ok: bool
    rows: int = 0
    error: Optional[ErrorKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, rows: int) -> "UploadResult":
        return cls(ok=True, rows=rows)

    @classmethod
    def failure(cls, error: UploadError) -> "UploadResult":
        return cls(ok=False, error=error.kind, message=str(error))
