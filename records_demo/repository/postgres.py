"""
PostgreSQL-backed record store.

Statements are composed with `psycopg.sql` so the configured table name is
always quoted as an identifier, and values are always bound as parameters.
Each statement runs in its own cursor context.
"""

from __future__ import annotations

from typing import List

import psycopg
from psycopg import Connection, sql
from pydantic import ValidationError

from records_demo.domain.models import Record
from records_demo.errors import QueryError, WriteError
from records_demo.repository.abstract import RecordStore

ID_COLUMN = "column1"
NAME_COLUMN = "sname"
DEPARTMENT_COLUMN = "department"


def table_identifier(table: str) -> sql.Identifier:
    """
    Quote a table name, splitting an optional schema prefix (``schema.table``).
    """
    return sql.Identifier(*table.split("."))


class RecordRepository(RecordStore):
    """
    Read and write demo records through a single psycopg connection.

    The repository does not own the connection; whoever opened it closes it.
    """

    def __init__(self, conn: Connection, table: str) -> None:
        self._conn = conn
        self.table = table
        self._table = table_identifier(table)

    def list_all(self) -> List[Record]:
        # No ORDER BY: row order is whatever the engine returns.
        query = sql.SQL("SELECT {id}, {name}, {department} FROM {table}").format(
            id=sql.Identifier(ID_COLUMN),
            name=sql.Identifier(NAME_COLUMN),
            department=sql.Identifier(DEPARTMENT_COLUMN),
            table=self._table,
        )
        try:
            with self._conn.cursor() as cur:
                cur.execute(query)
                rows = cur.fetchall()
        except psycopg.Error as exc:
            raise QueryError(f"Failed to list records from {self.table}: {exc}") from exc
        try:
            return [Record(id=row[0], name=row[1], department=row[2]) for row in rows]
        except ValidationError as exc:
            raise QueryError(f"Unexpected row shape in {self.table}: {exc}") from exc

    def insert(self, record: Record) -> int:
        query = sql.SQL("INSERT INTO {table} ({id}, {name}, {department}) VALUES (%s, %s, %s)").format(
            table=self._table,
            id=sql.Identifier(ID_COLUMN),
            name=sql.Identifier(NAME_COLUMN),
            department=sql.Identifier(DEPARTMENT_COLUMN),
        )
        return self._write(
            query, (record.id, record.name, record.department), f"insert record {record.id}"
        )

    def update_name(self, record_id: int, new_name: str) -> int:
        query = sql.SQL("UPDATE {table} SET {name} = %s WHERE {id} = %s").format(
            table=self._table,
            name=sql.Identifier(NAME_COLUMN),
            id=sql.Identifier(ID_COLUMN),
        )
        return self._write(query, (new_name, record_id), f"update record {record_id}")

    def delete(self, record_id: int) -> int:
        query = sql.SQL("DELETE FROM {table} WHERE {id} = %s").format(
            table=self._table,
            id=sql.Identifier(ID_COLUMN),
        )
        return self._write(query, (record_id,), f"delete record {record_id}")

    def _write(self, query: sql.Composed, params: tuple, action: str) -> int:
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, params)
                return cur.rowcount
        except psycopg.Error as exc:
            raise WriteError(f"Failed to {action} in {self.table}: {exc}") from exc


__all__ = [
    "DEPARTMENT_COLUMN",
    "ID_COLUMN",
    "NAME_COLUMN",
    "RecordRepository",
    "table_identifier",
]
