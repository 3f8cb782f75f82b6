"""
Pytest configuration for the records demo.

Provides fixtures for:
- An in-memory RecordStore double for unit tests
- Database connection management
- Demo table seeding for integration tests
"""

from __future__ import annotations

import os
import time
from contextlib import contextmanager
from typing import Callable, Dict, Generator, Iterable, Iterator, List, Optional

import psycopg
import pytest
from psycopg import sql

from records_demo.config import Settings, get_settings
from records_demo.domain.models import Record
from records_demo.errors import DatabaseConnectionError, WriteError
from records_demo.infrastructure.db_factory import build_dsn
from records_demo.repository.postgres import table_identifier

SEED_ROWS = [
    Record(id=1, name="A", department="Sales"),
    Record(id=2, name="B", department="Eng"),
    Record(id=3, name="C", department="Ops"),
    Record(id=4, name="D", department="HR"),
]

TEST_TABLE = "records_demo_test"


class InMemoryRecordStore:
    """
    Dict-backed RecordStore that mimics a table with a primary key.

    `fail_on` maps an operation name ("list_all", "insert", "update_name",
    "delete") to the exception it should raise instead of running.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self.table = "memory"
        self.rows: Dict[int, Record] = {r.id: r for r in records}
        self.fail_on: Dict[str, Exception] = {}
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def list_all(self) -> List[Record]:
        self._check("list_all")
        return list(self.rows.values())

    def insert(self, record: Record) -> int:
        self._check("insert")
        if record.id in self.rows:
            raise WriteError(f"duplicate key value violates unique constraint: id={record.id}")
        self.rows[record.id] = record
        return 1

    def update_name(self, record_id: int, new_name: str) -> int:
        self._check("update_name")
        current = self.rows.get(record_id)
        if current is None:
            return 0
        self.rows[record_id] = current.model_copy(update={"name": new_name})
        return 1

    def delete(self, record_id: int) -> int:
        self._check("delete")
        return 1 if self.rows.pop(record_id, None) is not None else 0


class StoreFactoryProbe:
    """Callable store factory that records how often the store was opened and closed."""

    def __init__(
        self,
        store: InMemoryRecordStore,
        connect_error: Optional[Exception] = None,
        close_delay: float = 0.0,
    ):
        self.store = store
        self.connect_error = connect_error
        self.close_delay = close_delay
        self.opened = 0
        self.closed = 0

    @contextmanager
    def _scope(self) -> Iterator[InMemoryRecordStore]:
        if self.connect_error is not None:
            raise self.connect_error
        self.opened += 1
        try:
            yield self.store
        finally:
            time.sleep(self.close_delay)
            self.closed += 1

    def __call__(self):
        return self._scope()


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """In-memory store preloaded with the four seed rows."""
    return InMemoryRecordStore(SEED_ROWS)


@pytest.fixture
def store_factory(memory_store: InMemoryRecordStore) -> StoreFactoryProbe:
    return StoreFactoryProbe(memory_store)


@pytest.fixture
def failing_connect_factory() -> StoreFactoryProbe:
    return StoreFactoryProbe(
        InMemoryRecordStore(),
        connect_error=DatabaseConnectionError("connection refused"),
    )


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Make sure env changes made by a test never leak through the settings cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "mydatabase"),
        db_table=TEST_TABLE,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def seeded_table(db_connection: psycopg.Connection, test_dsn: str) -> Generator[str, None, None]:
    """
    Create the test table, load the four seed rows, and drop it afterwards.

    Returns the table name.
    """
    from scripts.seed_table import _seed_table

    _seed_table(test_dsn, TEST_TABLE, SEED_ROWS)
    yield TEST_TABLE
    with db_connection.cursor() as cur:
        cur.execute(
            sql.SQL("DROP TABLE IF EXISTS {table}").format(table=table_identifier(TEST_TABLE))
        )


@pytest.fixture
def table_rows(db_connection: psycopg.Connection) -> Callable[[str], set]:
    """Return a reader that fetches a table as a set of (id, name, department) tuples."""

    def _read(table: str) -> set:
        with db_connection.cursor() as cur:
            cur.execute(
                sql.SQL("SELECT column1, sname, department FROM {table}").format(
                    table=table_identifier(table)
                )
            )
            return set(cur.fetchall())

    return _read
