"""
Command-line entry point for the dual-store jobs.

    python -m app.cli reconcile            # primary -> secondary, source wins
    python -m app.cli migrate              # secondary -> primary, insert only
    python -m app.cli counts               # row counts on both stores
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.services.sync import (
    ReconciliationError,
    ReconciliationSummary,
    SYNC_TABLES,
    run_reconciliation,
    select_tables,
    table_counts,
)
from app.services.sync.orchestrator import configured_engines

logger = logging.getLogger("app.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="yatra-db")
    parser.add_argument("--source-url", default=None, help="Override the source database URL")
    parser.add_argument("--target-url", default=None, help="Override the target database URL")
    parser.add_argument(
        "--output-json",
        default=None,
        help="Optional path to write the results as JSON",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("reconcile", "Upsert missing or changed primary rows into the secondary store"),
        ("migrate", "Copy rows missing from the primary store out of the secondary store"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--only-tables", default=None, help="Comma separated table names")
        sub.add_argument(
            "--fail-on-error",
            action="store_true",
            default=False,
            help="Exit with code 2 if any table or row failed",
        )

    subparsers.add_parser("counts", help="Print per-table row counts on both stores")
    return parser.parse_args(argv)


def _tables(only_tables: Optional[str]):
    if not only_tables:
        return SYNC_TABLES
    names = [entry.strip() for entry in only_tables.split(",") if entry.strip()]
    try:
        return select_tables(names)
    except KeyError as exc:
        raise SystemExit(f"unknown table: {exc.args[0]}") from exc


def _urls(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    if args.command == "migrate":
        source = args.source_url or settings.SECONDARY_DATABASE_URL
        target = args.target_url or settings.PRIMARY_DATABASE_URL
    else:
        source = args.source_url or settings.PRIMARY_DATABASE_URL
        target = args.target_url or settings.SECONDARY_DATABASE_URL
    if not source or not target:
        raise ReconciliationError("Database URLs not configured for reconciliation.")
    return {"source": source, "target": target}


def run_command(args: argparse.Namespace) -> Dict[str, Any]:
    urls = _urls(args)
    with configured_engines(urls["source"], urls["target"]) as (source_engine, target_engine):
        if args.command == "counts":
            return {"source": table_counts(source_engine), "target": table_counts(target_engine)}

        on_conflict = "ignore" if args.command == "migrate" else "update"
        results = run_reconciliation(
            source_engine,
            target_engine,
            tables=_tables(args.only_tables),
            on_conflict=on_conflict,
        )
        payload: Dict[str, Any] = {
            "command": args.command,
            "summary": ReconciliationSummary.from_results(results).to_dict(),
            "results": [result.to_dict() for result in results],
        }
        if args.command == "migrate":
            payload["counts"] = {"source": table_counts(source_engine), "target": table_counts(target_engine)}
        return payload


def run_cli(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    try:
        payload = run_command(args)
    except ReconciliationError as exc:
        logger.error("%s failed: %s", args.command, exc)
        raise SystemExit(1) from exc

    if args.output_json:
        with open(args.output_json, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True, default=str)
    else:
        print(json.dumps(payload, indent=2, sort_keys=True, default=str))

    if getattr(args, "fail_on_error", False):
        summary = payload.get("summary", {})
        if summary.get("tables_failed") or summary.get("rows_failed"):
            raise SystemExit(2)


if __name__ == "__main__":
    run_cli()


__all__ = ["parse_args", "run_cli", "run_command"]
