"""
Records Demo - list, insert, update and delete rows of a PostgreSQL table.

The package runs a fixed walkthrough against one table:

- List every record
- Insert one record
- Rename one record by primary key
- Delete one record by primary key
- List every record again

Each step reports an affected-row count or the records read, and failures
are tagged as connection, query or write errors. The connection is scoped so
it is released on every exit path.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from records_demo.config import Settings, get_settings
from records_demo.domain.models import DemoPlan, Record
from records_demo.errors import (
    DatabaseConnectionError,
    ErrorKind,
    QueryError,
    RecordsError,
    WriteError,
)
from records_demo.repository.abstract import OperationResult, RecordStore
from records_demo.repository.postgres import RecordRepository
from records_demo.runner import RunConfig, run_demo, run_listing
from records_demo.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "DemoPlan",
    "Record",
    # Errors
    "ErrorKind",
    "RecordsError",
    "DatabaseConnectionError",
    "QueryError",
    "WriteError",
    # Storage
    "OperationResult",
    "RecordStore",
    "RecordRepository",
    # Runner
    "RunConfig",
    "run_demo",
    "run_listing",
    # Logging
    "configure_logging",
    "get_logger",
]
