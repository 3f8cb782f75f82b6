from __future__ import annotations

import json
import sys

import typer

from records_demo.config import get_settings
from records_demo.domain.models import DemoPlan, Record
from records_demo.reporter import print_step, results_to_json
from records_demo.runner import FailurePolicy, RunConfig, has_failures, run_demo, run_listing
from records_demo.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Records demo CLI: list, insert, update and delete rows of one table.")
log = get_logger(__name__)

_DEFAULT_PLAN = DemoPlan()


def _setup_logging() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _finish(results: list, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(results_to_json(results), indent=2))
    if has_failures(results):
        failed = next(r for r in results if r.get("error"))
        log.error(
            f"Run failed at step '{failed['step']}'",
            extra={"step": failed["step"], "error_kind": failed.get("error_kind")},
        )
        raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"table={settings.db_table} env={settings.app_env} log_level={settings.log_level}"
    )


@app.command()
def run(
    insert_id: int = typer.Option(
        _DEFAULT_PLAN.insert_record.id, "--insert-id", help="Primary key of the inserted row."
    ),
    insert_name: str = typer.Option(
        _DEFAULT_PLAN.insert_record.name, "--insert-name", help="Name of the inserted row."
    ),
    insert_department: str = typer.Option(
        _DEFAULT_PLAN.insert_record.department,
        "--insert-department",
        help="Department of the inserted row.",
    ),
    update_id: int = typer.Option(
        _DEFAULT_PLAN.update_id, "--update-id", help="Primary key of the row to rename."
    ),
    update_name: str = typer.Option(
        _DEFAULT_PLAN.update_name, "--update-name", help="New name for the renamed row."
    ),
    delete_id: int = typer.Option(
        _DEFAULT_PLAN.delete_id, "--delete-id", help="Primary key of the row to delete."
    ),
    failure_policy: FailurePolicy = typer.Option(
        FailurePolicy.STRICT,
        "--failure-policy",
        help="Stop at the first failed step (strict) or keep going (tolerant).",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print step results as JSON instead of the console report."
    ),
) -> None:
    """
    Run the demo sequence: list, insert, update, delete, list.
    """
    _setup_logging()

    plan = DemoPlan(
        insert_record=Record(id=insert_id, name=insert_name, department=insert_department),
        update_id=update_id,
        update_name=update_name,
        delete_id=delete_id,
    )
    results = run_demo(
        RunConfig(plan=plan, failure_policy=failure_policy.value),
        on_step=None if as_json else print_step,
    )
    _finish(results, as_json)


@app.command("list")
def list_records(
    as_json: bool = typer.Option(
        False, "--json", help="Print step results as JSON instead of the console report."
    ),
) -> None:
    """
    Print every record of the configured table.
    """
    _setup_logging()
    results = run_listing(on_step=None if as_json else print_step)
    _finish(results, as_json)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
