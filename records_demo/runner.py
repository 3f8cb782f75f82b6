"""
Runner for the records demo sequence.

Usage (example from CLI):
    from records_demo.runner import RunConfig, run_demo

    results = run_demo(RunConfig(failure_policy="strict"))
    print(results)

The sequence is: connect, list, insert, update, delete, list, close. Each
step produces an `OperationResult`; failures are captured with their error
kind instead of escaping. The connection is released on every exit path.
"""

from __future__ import annotations

import enum
import time
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, ContextManager, Dict, Generator, List, Optional, Tuple

from records_demo.config import get_settings
from records_demo.domain.models import DemoPlan
from records_demo.errors import RecordsError
from records_demo.infrastructure.db_factory import open_connection
from records_demo.repository.abstract import OperationResult, RecordStore
from records_demo.repository.postgres import RecordRepository
from records_demo.utils.logging import get_logger

log = get_logger(__name__)


class FailurePolicy(str, enum.Enum):
    STRICT = "strict"
    TOLERANT = "tolerant"


FAILURE_POLICIES = tuple(policy.value for policy in FailurePolicy)

StoreFactory = Callable[[], ContextManager[RecordStore]]
StepAction = Callable[[], Dict[str, Any]]
StepObserver = Callable[[OperationResult], None]


@dataclass(frozen=True)
class RunConfig:
    """
    Inputs for one run of the demo.

    Attributes
    ----------
    plan : DemoPlan
        Rows and keys used by the write steps.
    failure_policy : str
        "strict" stops after the first failed step, "tolerant" records the
        failure and keeps going. A failed connect always ends the run.
    dsn : str | None
        Connection string override; defaults to the DSN built from settings.
    table : str | None
        Table name override; defaults to settings.db_table.
    """

    plan: DemoPlan = field(default_factory=DemoPlan)
    failure_policy: str = "strict"
    dsn: Optional[str] = None
    table: Optional[str] = None


@contextmanager
def open_record_store(
    dsn: Optional[str] = None, table: Optional[str] = None
) -> Generator[RecordRepository, None, None]:
    """Open a connection and wrap it in a `RecordRepository`."""
    with open_connection(dsn) as conn:
        yield RecordRepository(conn, table or get_settings().db_table)


def _demo_steps(store: RecordStore, plan: DemoPlan) -> List[Tuple[str, StepAction]]:
    return [
        ("list_initial", lambda: {"records": store.list_all()}),
        ("insert", lambda: {"rows_affected": store.insert(plan.insert_record)}),
        (
            "update",
            lambda: {"rows_affected": store.update_name(plan.update_id, plan.update_name)},
        ),
        ("delete", lambda: {"rows_affected": store.delete(plan.delete_id)}),
        ("list_final", lambda: {"records": store.list_all()}),
    ]


def _listing_steps(store: RecordStore, plan: DemoPlan) -> List[Tuple[str, StepAction]]:
    del plan
    return [("list", lambda: {"records": store.list_all()})]


def _failure(step: str, exc: RecordsError, start: float) -> OperationResult:
    return OperationResult(
        step=step,
        duration_seconds=time.perf_counter() - start,
        error=str(exc),
        error_kind=exc.kind.value,
    )


def _execute_step(name: str, action: StepAction) -> OperationResult:
    log.info(f"[STEP START] {name}", extra={"step": name})
    start = time.perf_counter()
    try:
        outcome = action()
    except RecordsError as exc:
        log.exception(
            f"[STEP FAILED] {name}", extra={"step": name, "error_kind": exc.kind.value}
        )
        return _failure(name, exc, start)

    result = OperationResult(step=name, duration_seconds=time.perf_counter() - start)
    result.update(outcome)  # type: ignore[typeddict-item]
    if "records" in result:
        log.info(f"[STEP SUCCESS] {name}", extra={"step": name, "rows": len(result["records"])})
    else:
        log.info(
            f"[STEP SUCCESS] {name}",
            extra={"step": name, "rows_affected": result.get("rows_affected")},
        )
    return result


def _run_steps(
    config: RunConfig,
    build_steps: Callable[[RecordStore, DemoPlan], List[Tuple[str, StepAction]]],
    store_factory: Optional[StoreFactory],
    on_step: Optional[StepObserver],
) -> List[OperationResult]:
    if config.failure_policy not in FAILURE_POLICIES:
        raise ValueError(
            f"Unknown failure policy '{config.failure_policy}'. "
            f"Available: {', '.join(FAILURE_POLICIES)}"
        )
    factory = store_factory or (lambda: open_record_store(dsn=config.dsn, table=config.table))
    results: List[OperationResult] = []

    def emit(result: OperationResult) -> None:
        results.append(result)
        if on_step is not None:
            on_step(result)

    with ExitStack() as stack:
        start = time.perf_counter()
        try:
            store = stack.enter_context(factory())
        except RecordsError as exc:
            log.exception(
                "[STEP FAILED] connect", extra={"step": "connect", "error_kind": exc.kind.value}
            )
            emit(_failure("connect", exc, start))
            return results
        emit(
            OperationResult(
                step="connect",
                duration_seconds=time.perf_counter() - start,
                notes=f"table={store.table}",
            )
        )

        for name, action in build_steps(store, config.plan):
            result = _execute_step(name, action)
            emit(result)
            if result.get("error") and config.failure_policy == FailurePolicy.STRICT:
                log.error(
                    f"[RUN ABORTED] {name} failed; skipping remaining steps",
                    extra={"step": name, "error_kind": result.get("error_kind")},
                )
                break

        close_start = time.perf_counter()

    emit(OperationResult(step="close", duration_seconds=time.perf_counter() - close_start))
    return results


def run_demo(
    config: Optional[RunConfig] = None,
    store_factory: Optional[StoreFactory] = None,
    on_step: Optional[StepObserver] = None,
) -> List[OperationResult]:
    """
    Run the full demo sequence and return one result per executed step.

    Parameters
    ----------
    config : RunConfig | None
        Plan and failure policy. Defaults to `RunConfig()`.
    store_factory : callable | None
        Zero-argument callable returning a context manager that yields a
        `RecordStore`. Defaults to a psycopg connection built from settings.
    on_step : callable | None
        Called with each result as soon as its step finishes.

    Returns
    -------
    List[OperationResult]
        Results in execution order, starting with "connect". When the
        connection was opened, the last entry is "close".
    """
    config = config or RunConfig()
    log.info(
        "[RUN START] demo sequence",
        extra={"failure_policy": config.failure_policy, "table": config.table},
    )
    results = _run_steps(config, _demo_steps, store_factory, on_step)
    log.info(
        "[RUN COMPLETE] demo sequence",
        extra={"steps": len(results), "failed": has_failures(results)},
    )
    return results


def run_listing(
    config: Optional[RunConfig] = None,
    store_factory: Optional[StoreFactory] = None,
    on_step: Optional[StepObserver] = None,
) -> List[OperationResult]:
    """Connect, list every record once, and close."""
    return _run_steps(config or RunConfig(), _listing_steps, store_factory, on_step)


def has_failures(results: List[OperationResult]) -> bool:
    """Whether any step in `results` failed."""
    return any(result.get("error") for result in results)


__all__ = [
    "FAILURE_POLICIES",
    "FailurePolicy",
    "RunConfig",
    "has_failures",
    "open_record_store",
    "run_demo",
    "run_listing",
]
