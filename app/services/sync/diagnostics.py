from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .diff import diff_rows
from .orchestrator import configured_engines, fetch_rows, open_connection
from .syncer import TableSyncer, describe_db_error
from .tables import SYNC_TABLES, SyncTable, get_sync_table, sync_order

logger = logging.getLogger(__name__)


def table_counts(engine: Engine, tables: Iterable[SyncTable] = SYNC_TABLES) -> Dict[str, Optional[int]]:
    """Row count per synced table; None where the table does not exist."""
    counts: Dict[str, Optional[int]] = {}
    with open_connection(engine, "count") as connection:
        inspector = inspect(connection)
        quote = connection.dialect.identifier_preparer.quote
        for table in sync_order(tables):
            if not inspector.has_table(table.name):
                counts[table.name] = None
                continue
            counts[table.name] = connection.execute(
                text(f"SELECT COUNT(*) FROM {quote(table.name)}")
            ).scalar_one()
    return counts


def find_missing_blog(source_engine: Engine, target_engine: Engine) -> Dict[str, Any]:
    with open_connection(source_engine, "source") as source, open_connection(target_engine, "target") as target:
        blogs = get_sync_table("blogs")
        try:
            source_rows = fetch_rows(source, blogs)
            # an absent target table means every blog is missing there
            target_rows = fetch_rows(target, blogs)
        except SQLAlchemyError as exc:
            source.rollback()
            target.rollback()
            return {"success": False, "blog_id": None, "error": describe_db_error(exc)}
        if source_rows is None:
            return {
                "success": False,
                "blog_id": None,
                "error": {"message": "table blogs does not exist on the source", "detail": None, "hint": None, "code": None},
            }
        missing_rows = diff_rows(source_rows, target_rows, primary_key=blogs.primary_key).missing
        missing = missing_rows[0] if missing_rows else None
        if missing is None:
            return {
                "success": True,
                "blog_id": None,
                "message": "Every primary blog exists in the secondary store.",
            }
        syncer = TableSyncer(target, "blogs")
        try:
            syncer.upsert_row(missing)
        except SQLAlchemyError as exc:
            error = describe_db_error(exc)
            logger.warning("[DB-SYNC] debug sync of blog %s failed: %s", missing["id"], error["message"])
            return {"success": False, "blog_id": missing["id"], "error": error}
        return {"success": True, "blog_id": missing["id"], "message": "Blog synced to the secondary store."}


def debug_failing_blog(source_url: Optional[str] = None, target_url: Optional[str] = None) -> Dict[str, Any]:
    with configured_engines(source_url, target_url) as (source_engine, target_engine):
        return find_missing_blog(source_engine, target_engine)


def store_counts(source_url: Optional[str] = None, target_url: Optional[str] = None) -> Dict[str, Any]:
    with configured_engines(source_url, target_url) as (source_engine, target_engine):
        return {"primary": table_counts(source_engine), "secondary": table_counts(target_engine)}


__all__ = ["debug_failing_blog", "find_missing_blog", "store_counts", "table_counts"]
