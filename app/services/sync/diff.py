from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional


def normalize_value(value: Any) -> Any:
    """Bring a column value to a driver-independent form for comparison.

    The same JSON column comes back as a dict from psycopg2 and as text from
    other drivers, and timestamps may be datetimes or strings.
    """
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    if isinstance(value, datetime) and value.tzinfo is not None:
        # stores may report different session time zones for the same instant
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (uuid.UUID, Decimal)):
        return str(value)
    if isinstance(value, memoryview):
        return value.tobytes()
    return value


def _row_key(row: Mapping[str, Any], primary_key: str, side: str) -> Any:
    if primary_key not in row:
        raise ValueError(f"{side} row has no primary key column '{primary_key}'")
    return normalize_value(row[primary_key])


def rows_differ(source_row: Mapping[str, Any], target_row: Mapping[str, Any]) -> bool:
    for column, value in source_row.items():
        if column not in target_row:
            return True
        if normalize_value(value) != normalize_value(target_row[column]):
            return True
    return False


@dataclass
class RowDiff:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    missing: List[Dict[str, Any]] = field(default_factory=list)
    changed: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def diff_rows(
    source_rows: Iterable[Mapping[str, Any]],
    target_rows: Optional[Iterable[Mapping[str, Any]]],
    primary_key: str = "id",
) -> RowDiff:
    """Split source rows into those missing from and those differing in target.

    ``target_rows=None`` means the table does not exist on the target, so
    every source row counts as missing. Rows found only in the target are
    ignored. ``RowDiff.rows`` keeps source order.
    """
    target_index: Optional[Dict[Any, Mapping[str, Any]]] = None
    if target_rows is not None:
        target_index = {}
        for row in target_rows:
            target_index[_row_key(row, primary_key, "target")] = row

    diff = RowDiff()
    for row in source_rows:
        key = _row_key(row, primary_key, "source")
        existing = target_index.get(key) if target_index is not None else None
        if existing is None:
            diff.missing.append(dict(row))
        elif rows_differ(row, existing):
            diff.changed.append(dict(row))
        else:
            continue
        diff.rows.append(dict(row))
    return diff


def rows_to_upsert(
    source_rows: Iterable[Mapping[str, Any]],
    target_rows: Optional[Iterable[Mapping[str, Any]]],
    primary_key: str = "id",
) -> List[Dict[str, Any]]:
    return diff_rows(source_rows, target_rows, primary_key=primary_key).rows


__all__ = ["RowDiff", "diff_rows", "rows_to_upsert", "rows_differ", "normalize_value"]
