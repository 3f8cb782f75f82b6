"""
Repository package for the records demo.

Re-exports the storage interface, the step result contract and the psycopg
implementation so downstream code can import from `records_demo.repository`.
"""

from records_demo.repository.abstract import OperationResult, RecordStore
from records_demo.repository.postgres import RecordRepository

__all__ = [
    "OperationResult",
    "RecordStore",
    "RecordRepository",
]
