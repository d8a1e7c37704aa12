"""
Primary -> secondary store reconciliation.

Each run snapshots every synced table on both stores, diffs the snapshots by
primary key and upserts whatever the target is missing or has stale. Tables
are visited in foreign-key order; a bad row or table is reported and skipped
rather than aborting the run, and the next run picks it up again.
"""

from .diagnostics import debug_failing_blog, store_counts, table_counts
from .diff import diff_rows, rows_to_upsert
from .orchestrator import ReconciliationError, run_full_reconciliation, run_reconciliation
from .results import ReconciliationSummary, TableSyncResult
from .syncer import TableSyncer
from .tables import SYNC_TABLES, SyncTable, select_tables, sync_order

__all__ = [
    "ReconciliationError",
    "ReconciliationSummary",
    "SYNC_TABLES",
    "SyncTable",
    "TableSyncResult",
    "TableSyncer",
    "debug_failing_blog",
    "diff_rows",
    "rows_to_upsert",
    "select_tables",
    "run_full_reconciliation",
    "run_reconciliation",
    "store_counts",
    "sync_order",
    "table_counts",
]
