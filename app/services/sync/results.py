from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List


@dataclass
class RowFailure:
    id: Any
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "error": self.error}


@dataclass
class TableSyncResult:
    table: str
    scanned: int = 0
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    status: str = "success"
    message: str = ""
    failures: List[RowFailure] = field(default_factory=list)

    @classmethod
    def error(cls, table: str, message: str) -> "TableSyncResult":
        return cls(table=table, status="error", message=message)

    def record_failure(self, row_id: Any, error: str) -> None:
        self.failed += 1
        self.failures.append(RowFailure(id=row_id, error=error))

    def finalize(self) -> "TableSyncResult":
        self.status = "partial" if self.failed else "success"
        self.message = (
            f"Processed {self.scanned} rows: {self.succeeded} applied, {self.failed} skipped."
        )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "scanned": self.scanned,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "status": self.status,
            "message": self.message,
            "failures": [failure.to_dict() for failure in self.failures],
        }


@dataclass
class ReconciliationSummary:
    tables: int
    tables_failed: int
    rows_applied: int
    rows_failed: int

    @classmethod
    def from_results(cls, results: Iterable[TableSyncResult]) -> "ReconciliationSummary":
        tables = tables_failed = applied = failed = 0
        for result in results:
            tables += 1
            if result.status == "error":
                tables_failed += 1
            applied += result.succeeded
            failed += result.failed
        return cls(tables=tables, tables_failed=tables_failed, rows_applied=applied, rows_failed=failed)

    @property
    def clean(self) -> bool:
        return not self.tables_failed and not self.rows_failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": self.tables,
            "tables_failed": self.tables_failed,
            "rows_applied": self.rows_applied,
            "rows_failed": self.rows_failed,
        }


__all__ = ["RowFailure", "TableSyncResult", "ReconciliationSummary"]
