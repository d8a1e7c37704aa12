from __future__ import annotations

from dataclasses import dataclass, replace
from graphlib import TopologicalSorter
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class SyncTable:
    """A table kept in step between the two stores."""

    name: str
    depends_on: Tuple[str, ...] = ()
    primary_key: str = "id"
    order_by: Optional[Tuple[str, ...]] = None

    @property
    def ordering(self) -> Tuple[str, ...]:
        columns = tuple(self.order_by or ())
        if self.primary_key not in columns:
            columns += (self.primary_key,)
        return columns


# Foreign keys point from a table to the tables listed in depends_on.
SYNC_TABLES: Tuple[SyncTable, ...] = (
    SyncTable("users"),
    SyncTable("authors", depends_on=("users",)),
    SyncTable("blogs", depends_on=("authors",), order_by=("created_at",)),
    # created_at order puts parents ahead of their replies
    SyncTable("blog_comments", depends_on=("blogs", "users"), order_by=("created_at",)),
    SyncTable("blog_likes", depends_on=("blogs", "users")),
    SyncTable("comment_likes", depends_on=("blog_comments", "users")),
    SyncTable("products"),
    SyncTable("contact_messages"),
    SyncTable("newsletter_subscribers"),
)


def sync_order(tables: Iterable[SyncTable] = SYNC_TABLES) -> List[SyncTable]:
    """Order tables so every table comes after the tables it references.

    Tables that become ready together keep their declaration order, so the
    result is stable from run to run. Raises ``ValueError`` for a dependency
    on an undeclared table and ``graphlib.CycleError`` for cycles.
    """
    declared = list(tables)
    by_name = {table.name: table for table in declared}
    position = {table.name: idx for idx, table in enumerate(declared)}
    sorter: TopologicalSorter = TopologicalSorter()
    for table in declared:
        unknown = [dep for dep in table.depends_on if dep not in by_name]
        if unknown:
            raise ValueError(f"{table.name} depends on undeclared table(s): {', '.join(unknown)}")
        sorter.add(table.name, *table.depends_on)
    sorter.prepare()
    ordered: List[SyncTable] = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready(), key=position.__getitem__)
        for name in ready:
            ordered.append(by_name[name])
            sorter.done(name)
    return ordered


def get_sync_table(name: str, tables: Iterable[SyncTable] = SYNC_TABLES) -> SyncTable:
    for table in tables:
        if table.name == name:
            return table
    raise KeyError(name)


def select_tables(names: Iterable[str], tables: Iterable[SyncTable] = SYNC_TABLES) -> List[SyncTable]:
    """Restrict a run to the named tables.

    Dependencies on tables left out of the run are dropped; the caller is
    expected to have synced those already.
    """
    wanted = [get_sync_table(name, tables) for name in names]
    kept = {table.name for table in wanted}
    return [replace(table, depends_on=tuple(dep for dep in table.depends_on if dep in kept)) for table in wanted]


__all__ = ["SyncTable", "SYNC_TABLES", "get_sync_table", "select_tables", "sync_order"]
