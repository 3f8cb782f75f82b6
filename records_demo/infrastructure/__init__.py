"""
Infrastructure package for the records demo.

Centralizes database connectivity concerns (DSN building, scoped connections).
Keep this layer focused on I/O and resource management, decoupled from the
repository and runner logic.
"""

from records_demo.infrastructure.db_factory import build_dsn, connect, open_connection

__all__ = [
    "build_dsn",
    "connect",
    "open_connection",
]
