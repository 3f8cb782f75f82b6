"""
Table setup script for the records demo.

Creates the demo table when it is missing and resets it to the four seed
rows the demo walkthrough expects.
"""

from __future__ import annotations

import sys
from typing import Iterable, Sequence

import psycopg
import typer
from psycopg import sql

from records_demo.config import get_settings
from records_demo.domain.models import Record
from records_demo.infrastructure.db_factory import build_dsn
from records_demo.repository.postgres import (
    DEPARTMENT_COLUMN,
    ID_COLUMN,
    NAME_COLUMN,
    table_identifier,
)

app = typer.Typer(help="Create and seed the records demo table.")

SEED_RECORDS: Sequence[Record] = (
    Record(id=1, name="A", department="Sales"),
    Record(id=2, name="B", department="Eng"),
    Record(id=3, name="C", department="Ops"),
    Record(id=4, name="D", department="HR"),
)


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _create_table(cur: psycopg.Cursor, table: str) -> None:
    cur.execute(
        sql.SQL(
            "CREATE TABLE IF NOT EXISTS {table} ("
            "{id} INTEGER PRIMARY KEY, {name} TEXT NOT NULL, {department} TEXT NOT NULL)"
        ).format(
            table=table_identifier(table),
            id=sql.Identifier(ID_COLUMN),
            name=sql.Identifier(NAME_COLUMN),
            department=sql.Identifier(DEPARTMENT_COLUMN),
        )
    )


def _seed_table(
    dsn: str, table: str, records: Iterable[Record] = SEED_RECORDS, truncate: bool = True
) -> int:
    """
    Create `table` if needed, optionally empty it, and insert `records`.

    Returns the number of rows in the table afterwards.
    """
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            _create_table(cur, table)
            if truncate:
                cur.execute(sql.SQL("TRUNCATE TABLE {table}").format(table=table_identifier(table)))
            cur.executemany(
                sql.SQL("INSERT INTO {table} ({id}, {name}, {department}) VALUES (%s, %s, %s)").format(
                    table=table_identifier(table),
                    id=sql.Identifier(ID_COLUMN),
                    name=sql.Identifier(NAME_COLUMN),
                    department=sql.Identifier(DEPARTMENT_COLUMN),
                ),
                [(r.id, r.name, r.department) for r in records],
            )
            cur.execute(sql.SQL("SELECT COUNT(*) FROM {table}").format(table=table_identifier(table)))
            count = cur.fetchone()[0]
        conn.commit()
    return count


@app.command()
def main(
    table: str | None = typer.Option(
        None,
        "--table",
        "-t",
        help="Table to create and seed (default from settings).",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    keep_rows: bool = typer.Option(
        False,
        "--keep-rows",
        help="Do not truncate the table before seeding.",
    ),
) -> None:
    """
    Create the demo table if missing and load the seed rows.
    """
    target = table or get_settings().db_table
    typer.echo(f"Seeding {len(SEED_RECORDS)} rows into {target}...")
    count = _seed_table(_build_dsn(dsn), target, truncate=not keep_rows)
    typer.echo(f"Done. {target} now holds {count} row(s).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
