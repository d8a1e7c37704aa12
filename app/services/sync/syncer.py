from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from .results import TableSyncResult

logger = logging.getLogger(__name__)

ON_CONFLICT_MODES = ("update", "ignore")


def encode_value(value: Any) -> Any:
    # psycopg2 hands jsonb back as dict/list but will not bind one; send JSON text
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return value


def describe_db_error(exc: BaseException) -> Dict[str, Any]:
    """Pull the driver-level fields out of a database error for triage."""
    orig = getattr(exc, "orig", None) or exc
    diag = getattr(orig, "diag", None)
    lines = str(orig).strip().splitlines()
    return {
        "message": lines[0] if lines else orig.__class__.__name__,
        "detail": getattr(diag, "message_detail", None),
        "hint": getattr(diag, "message_hint", None),
        "code": getattr(orig, "pgcode", None) or getattr(orig, "sqlite_errorname", None),
    }


class TableSyncer:
    """Upserts rows into one table of the target store, one row per transaction."""

    def __init__(
        self,
        connection: Connection,
        table: str,
        primary_key: str = "id",
        on_conflict: str = "update",
    ) -> None:
        if on_conflict not in ON_CONFLICT_MODES:
            raise ValueError(f"on_conflict must be one of {ON_CONFLICT_MODES}, got {on_conflict!r}")
        self.connection = connection
        self.table = table
        self.primary_key = primary_key
        self.on_conflict = on_conflict
        self._quote = connection.dialect.identifier_preparer.quote

    def build_upsert(self, row: Mapping[str, Any]) -> Tuple[TextClause, Dict[str, Any]]:
        columns = list(row.keys())
        if self.primary_key not in columns:
            raise ValueError(f"row for {self.table} has no '{self.primary_key}' column")
        quote = self._quote
        names = ", ".join(quote(column) for column in columns)
        binds = ", ".join(f":p{idx}" for idx in range(len(columns)))
        updates = [
            f"{quote(column)} = EXCLUDED.{quote(column)}"
            for column in columns
            if column != self.primary_key
        ]
        if self.on_conflict == "ignore" or not updates:
            conflict = "DO NOTHING"
        else:
            conflict = "DO UPDATE SET " + ", ".join(updates)
        sql = (
            f"INSERT INTO {quote(self.table)} ({names}) VALUES ({binds}) "
            f"ON CONFLICT ({quote(self.primary_key)}) {conflict}"
        )
        params = {f"p{idx}": encode_value(row[column]) for idx, column in enumerate(columns)}
        return text(sql), params

    def upsert_row(self, row: Mapping[str, Any]) -> None:
        """Apply a single row, raising the database error on failure."""
        statement, params = self.build_upsert(row)
        try:
            self.connection.execute(statement, params)
            self.connection.commit()
        except SQLAlchemyError:
            self.connection.rollback()
            raise

    def apply(self, rows: Iterable[Mapping[str, Any]], scanned: Optional[int] = None) -> TableSyncResult:
        rows = list(rows)
        result = TableSyncResult(table=self.table, scanned=len(rows) if scanned is None else scanned)
        for row in rows:
            result.attempted += 1
            row_id = row.get(self.primary_key)
            try:
                self.upsert_row(row)
            except SQLAlchemyError as exc:
                error = describe_db_error(exc)["message"]
                result.record_failure(row_id, error)
                logger.warning("[DB-SYNC] %s row %s skipped: %s", self.table, row_id, error)
                continue
            result.succeeded += 1
        return result.finalize()


__all__ = ["TableSyncer", "encode_value", "describe_db_error"]
