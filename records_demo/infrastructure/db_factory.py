"""
Database connection factory utilities for the records demo.

Provides DSN composition from settings and a scoped connection helper that
guarantees the connection is closed on every exit path. Connections run in
autocommit mode so each write is durable as soon as it returns.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection
from psycopg.conninfo import make_conninfo

from records_demo.config import Settings, get_settings
from records_demo.errors import DatabaseConnectionError
from records_demo.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a libpq conninfo string from settings, quoting every value."""
    settings = settings or get_settings()
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        user=settings.db_user,
        password=settings.db_password,
        dbname=settings.db_name,
    )


def connect(dsn: Optional[str] = None) -> Connection:
    """
    Open a dedicated synchronous connection.

    Parameters
    ----------
    dsn : str, optional
        Connection string override. Defaults to the DSN built from settings.

    Returns
    -------
    Connection
        A new psycopg connection in autocommit mode.

    Raises
    ------
    DatabaseConnectionError
        If the server is unreachable or rejects the credentials.
    """
    try:
        return psycopg.connect(dsn or build_dsn(), autocommit=True)
    except psycopg.Error as exc:
        raise DatabaseConnectionError(f"Could not connect to the database: {exc}") from exc


@contextmanager
def open_connection(dsn: Optional[str] = None) -> Generator[Connection, None, None]:
    """
    Context manager yielding a connection that is always closed afterwards.

    Example
    -------
        with open_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """
    conn = connect(dsn)
    log.info("Connected to the database")
    try:
        yield conn
    finally:
        conn.close()
        log.info("Connection closed")


__all__ = [
    "build_dsn",
    "connect",
    "open_connection",
]
