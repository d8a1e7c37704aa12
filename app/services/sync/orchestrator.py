from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from app.core.config import settings
from app.db.session import build_engine

from .diff import diff_rows
from .results import ReconciliationSummary, TableSyncResult
from .syncer import TableSyncer
from .tables import SYNC_TABLES, SyncTable, sync_order

logger = logging.getLogger(__name__)


class ReconciliationError(RuntimeError):
    """The job could not run at all (configuration or connection failure)."""


def fetch_rows(connection: Connection, table: SyncTable) -> Optional[List[Dict[str, Any]]]:
    """Snapshot a table, or return None when the table does not exist."""
    if not inspect(connection).has_table(table.name):
        return None
    quote = connection.dialect.identifier_preparer.quote
    ordering = ", ".join(quote(column) for column in table.ordering)
    result = connection.execute(text(f"SELECT * FROM {quote(table.name)} ORDER BY {ordering}"))
    rows = [dict(row._mapping) for row in result]
    # end the read transaction so the syncer starts clean
    connection.rollback()
    return rows


def reconcile_table(
    source: Connection,
    target: Connection,
    table: SyncTable,
    on_conflict: str = "update",
) -> TableSyncResult:
    source_rows = fetch_rows(source, table)
    if source_rows is None:
        return TableSyncResult.error(table.name, f"table {table.name} does not exist on the source")
    target_rows = fetch_rows(target, table)
    if target_rows is None:
        logger.warning("[DB-SYNC] %s missing on target, treating every row as missing", table.name)
    diff = diff_rows(source_rows, target_rows, primary_key=table.primary_key)
    # insert-only runs leave rows that already exist untouched
    plan = diff.missing if on_conflict == "ignore" else diff.rows
    logger.info(
        "[DB-SYNC] %s: %d source rows, %d missing, %d changed",
        table.name,
        len(source_rows),
        len(diff.missing),
        len(diff.changed),
    )
    syncer = TableSyncer(target, table.name, primary_key=table.primary_key, on_conflict=on_conflict)
    return syncer.apply(plan, scanned=len(source_rows))


@contextmanager
def open_connection(engine: Engine, role: str) -> Iterator[Connection]:
    try:
        connection = engine.connect()
    except SQLAlchemyError as exc:
        raise ReconciliationError(f"could not connect to {role} database: {exc}") from exc
    try:
        yield connection
    finally:
        connection.close()


def run_reconciliation(
    source_engine: Engine,
    target_engine: Engine,
    tables: Optional[Iterable[SyncTable]] = None,
    on_conflict: str = "update",
) -> List[TableSyncResult]:
    """Copy missing or changed rows from source to target, table by table.

    A table that fails is reported with status ``error`` and the remaining
    tables still run. Nothing is rolled back across rows or tables.
    """
    ordered = sync_order(tables if tables is not None else SYNC_TABLES)
    results: List[TableSyncResult] = []
    with open_connection(source_engine, "source") as source, open_connection(target_engine, "target") as target:
        for table in ordered:
            try:
                result = reconcile_table(source, target, table, on_conflict=on_conflict)
            except (SQLAlchemyError, ValueError) as exc:
                source.rollback()
                target.rollback()
                logger.error("[DB-SYNC] %s failed: %s", table.name, exc)
                result = TableSyncResult.error(table.name, str(exc))
            results.append(result)
    summary = ReconciliationSummary.from_results(results)
    logger.info(
        "[DB-SYNC] finished: %d tables (%d failed), %d rows applied, %d rows skipped",
        summary.tables,
        summary.tables_failed,
        summary.rows_applied,
        summary.rows_failed,
    )
    return results


def _create_engine(url: Optional[str], role: str) -> Engine:
    if not url:
        raise ReconciliationError("Database URLs not configured for reconciliation.")
    try:
        return build_engine(url, poolclass=NullPool)
    except SQLAlchemyError as exc:
        raise ReconciliationError(f"invalid {role} database URL: {exc}") from exc


@contextmanager
def configured_engines(
    source_url: Optional[str] = None,
    target_url: Optional[str] = None,
) -> Iterator[Tuple[Engine, Engine]]:
    """Engines for primary -> secondary unless other URLs are given."""
    source_engine = _create_engine(source_url or settings.PRIMARY_DATABASE_URL, "source")
    try:
        target_engine = _create_engine(target_url or settings.SECONDARY_DATABASE_URL, "target")
    except ReconciliationError:
        source_engine.dispose()
        raise
    try:
        yield source_engine, target_engine
    finally:
        source_engine.dispose()
        target_engine.dispose()


def run_full_reconciliation(
    source_url: Optional[str] = None,
    target_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    logger.info("[DB-SYNC] starting reconciliation")
    with configured_engines(source_url, target_url) as (source_engine, target_engine):
        results = run_reconciliation(source_engine, target_engine)
    return [result.to_dict() for result in results]


__all__ = [
    "ReconciliationError",
    "configured_engines",
    "fetch_rows",
    "open_connection",
    "reconcile_table",
    "run_full_reconciliation",
    "run_reconciliation",
]
