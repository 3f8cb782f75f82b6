from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from records_demo.domain.models import Record
from records_demo.repository.abstract import OperationResult

_LIST_TITLES = {
    "list_initial": "Initial Data",
    "list_final": "Updated Data",
    "list": "Records",
}

_WRITE_VERBS = {
    "insert": "Inserted",
    "update": "Updated",
    "delete": "Deleted",
}


def _cell(value: Optional[str]) -> str:
    return "null" if value is None else escape(value)


def records_table(records: List[Record], title: str) -> Table:
    """
    Build a rich table with one row per record.

    Rows keep the order the database returned them in. Long values wrap
    instead of being truncated.
    """
    table = Table(title=title, box=box.ROUNDED, caption=f"{len(records)} record(s)")
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta", overflow="fold")
    table.add_column("Department", style="green", overflow="fold")
    for record in records:
        table.add_row(str(record.id), _cell(record.name), _cell(record.department))
    return table


def print_step(result: OperationResult, console: Optional[Console] = None) -> None:
    """
    Render one step result as human-readable console output.
    """
    console = console or Console()
    step = result.get("step", "unknown")

    if result.get("error"):
        console.print(
            f"[bold red]{step} failed ({result.get('error_kind')}):[/bold red] {escape(result['error'])}",
            highlight=False,
        )
        return

    if step == "connect":
        console.print("Connected to the database.")
    elif step == "close":
        console.print("Connection closed.")
    elif step in _LIST_TITLES:
        console.print(records_table(result.get("records", []), _LIST_TITLES[step]))
    elif step in _WRITE_VERBS:
        console.print(f"{_WRITE_VERBS[step]} {result.get('rows_affected', 0)} record(s).")
    else:
        console.print(f"{step}: done")


def results_to_json(results: List[OperationResult]) -> List[Dict[str, Any]]:
    """
    Convert step results into JSON-serializable dictionaries.
    """
    payload: List[Dict[str, Any]] = []
    for result in results:
        item: Dict[str, Any] = dict(result)
        if "records" in item:
            item["records"] = [record.model_dump() for record in item["records"]]
        if "duration_seconds" in item:
            item["duration_seconds"] = round(item["duration_seconds"], 4)
        payload.append(item)
    return payload


__all__ = ["print_step", "records_table", "results_to_json"]
