"""
Storage interface and step result contract for the records demo.

The runner only talks to a `RecordStore`, so the psycopg repository can be
swapped for an in-memory double in tests. Every step of the demo sequence is
reported as an `OperationResult`.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, TypedDict, runtime_checkable

from records_demo.domain.models import Record


class OperationResult(TypedDict, total=False):
    """
    Outcome of one step of the demo sequence.

    A successful read carries `records`, a successful write carries
    `rows_affected`. A failed step carries `error` and `error_kind` instead.
    """

    step: str
    records: List[Record]
    rows_affected: Optional[int]
    duration_seconds: float
    error: Optional[str]
    error_kind: Optional[str]
    notes: Optional[str]


@runtime_checkable
class RecordStore(Protocol):
    """
    Common interface for anything that can hold demo records.

    Attributes
    ----------
    table : str
        Name of the backing table (or a label for non-SQL stores).
    """

    table: str

    def list_all(self) -> List[Record]:
        """
        Return every stored record, in whatever order the store yields them.

        Raises
        ------
        QueryError
            If the read fails.
        """
        ...

    def insert(self, record: Record) -> int:
        """Insert a record and return the affected-row count."""
        ...

    def update_name(self, record_id: int, new_name: str) -> int:
        """Rename the record with `record_id`; returns 0 when it does not exist."""
        ...

    def delete(self, record_id: int) -> int:
        """Delete the record with `record_id`; returns 0 when it does not exist."""
        ...


__all__ = [
    "OperationResult",
    "RecordStore",
]
