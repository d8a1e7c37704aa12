import pytest

from app.services.sync import SYNC_TABLES, SyncTable, select_tables, sync_order


def names(tables):
    return [table.name for table in tables]


def test_default_order_respects_foreign_keys():
    order = names(sync_order(SYNC_TABLES))
    assert order.index("users") < order.index("authors") < order.index("blogs")
    assert order.index("blogs") < order.index("blog_comments") < order.index("comment_likes")
    assert order.index("blogs") < order.index("blog_likes")
    assert set(order) == set(names(SYNC_TABLES))


def test_independent_tables_keep_declaration_order():
    tables = [SyncTable("zeta"), SyncTable("alpha"), SyncTable("mid")]
    assert names(sync_order(tables)) == ["zeta", "alpha", "mid"]


def test_dependents_move_after_their_parents():
    tables = [SyncTable("likes", depends_on=("posts",)), SyncTable("posts")]
    assert names(sync_order(tables)) == ["posts", "likes"]


def test_unknown_dependency_is_rejected():
    with pytest.raises(ValueError):
        sync_order([SyncTable("blogs", depends_on=("authors",))])


def test_ordering_appends_primary_key():
    assert SyncTable("blogs", order_by=("created_at",)).ordering == ("created_at", "id")
    assert SyncTable("users").ordering == ("id",)


def test_select_tables_drops_dependencies_outside_the_run():
    selected = select_tables(["blogs", "blog_likes"])
    assert names(sync_order(selected)) == ["blogs", "blog_likes"]
    assert selected[0].depends_on == ()
    assert selected[1].depends_on == ("blogs",)


def test_select_tables_unknown_name():
    with pytest.raises(KeyError):
        select_tables(["carts"])
