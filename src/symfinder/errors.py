"""Error taxonomy for query execution and index directory validation."""

from __future__ import annotations

from enum import Enum


class SymFinderError(RuntimeError):
    """Base class for SymFinder failures."""


class QueryError(SymFinderError):
    """Raised when running or parsing a cscope query fails."""


class SpawnFailure(QueryError):
    """Raised when the indexer process cannot be started."""


class StreamReadError(QueryError):
    """Raised when reading the indexer output fails before end of input."""


class QueryTimeout(StreamReadError):
    """Raised when the indexer exceeds the configured timeout."""


class OutOfMemory(QueryError):
    """Raised when the output or result buffer cannot be allocated."""


class EmptyResult(QueryError):
    """Raised when the indexer produced no output at all."""


class QueryFailed(QueryError):
    """User-facing wrapper raised by the session for any query failure."""

    def __init__(self, reason: QueryError) -> None:
        super().__init__("cscope query failed")
        self.reason = reason


class ValidationErrorKind(str, Enum):
    NOT_SET = "not_set"
    NOT_ABSOLUTE = "not_absolute"
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    STAT_FAILED = "stat_failed"
    DATABASE_MISSING = "database_missing"
    DATABASE_NOT_REGULAR_FILE = "database_not_regular_file"


class ValidationError(SymFinderError, ValueError):
    """Raised when a candidate index directory is rejected."""

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
