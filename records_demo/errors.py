"""
Error taxonomy for the records demo.

Every failure raised by the data-access layer is one of three kinds so the
runner and its callers can tell them apart without parsing messages.
"""

from __future__ import annotations

import enum
from typing import ClassVar


class ErrorKind(str, enum.Enum):
    CONNECTION = "connection"
    QUERY = "query"
    WRITE = "write"


class RecordsError(Exception):
    """Base class for all database failures surfaced by the demo."""

    kind: ClassVar[ErrorKind]


class DatabaseConnectionError(RecordsError):
    """The database could not be reached or refused the credentials."""

    kind = ErrorKind.CONNECTION


class QueryError(RecordsError):
    """A read failed (malformed query or lost connection)."""

    kind = ErrorKind.QUERY


class WriteError(RecordsError):
    """An insert, update or delete failed (constraint violation or lost connection)."""

    kind = ErrorKind.WRITE


__all__ = [
    "ErrorKind",
    "RecordsError",
    "DatabaseConnectionError",
    "QueryError",
    "WriteError",
]
