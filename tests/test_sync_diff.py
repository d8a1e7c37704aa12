from datetime import datetime, timedelta, timezone
from decimal import Decimal
import uuid

import pytest

from app.services.sync import diff_rows, rows_to_upsert
from app.services.sync.diff import normalize_value
from app.services.sync.syncer import encode_value


def test_missing_and_changed_rows_keep_source_order():
    source = [
        {"id": "a", "name": "Jaipur"},
        {"id": "b", "name": "Udaipur"},
        {"id": "c", "name": "Leh"},
    ]
    target = [
        {"id": "b", "name": "Udaipur (old)"},
        {"id": "c", "name": "Leh"},
    ]

    diff = diff_rows(source, target)

    assert [row["id"] for row in diff.rows] == ["a", "b"]
    assert [row["id"] for row in diff.missing] == ["a"]
    assert [row["id"] for row in diff.changed] == ["b"]
    assert len(diff) == 2


def test_identical_tables_need_nothing():
    rows = [{"id": "a", "name": "Jaipur"}]
    assert rows_to_upsert(rows, [dict(row) for row in rows]) == []


def test_absent_target_table_means_every_row():
    source = [{"id": "a"}, {"id": "b"}]
    assert rows_to_upsert(source, None) == source


def test_target_only_rows_are_ignored():
    assert rows_to_upsert([], [{"id": "orphan"}]) == []


def test_row_without_primary_key_raises():
    with pytest.raises(ValueError):
        rows_to_upsert([{"name": "no id"}], [])
    with pytest.raises(ValueError):
        rows_to_upsert([{"id": "a"}], [{"name": "no id"}])


def test_custom_primary_key():
    source = [{"slug": "jaipur", "title": "Pink City"}]
    target = [{"slug": "jaipur", "title": "Pink City"}]
    assert rows_to_upsert(source, target, primary_key="slug") == []


def test_driver_representations_do_not_count_as_changes():
    created = datetime(2024, 3, 1, 9, 30)
    row_id = uuid.uuid4()
    source = [{"id": row_id, "images": ["a.jpg", "b.jpg"], "meta": {"b": 1, "a": 2}, "created_at": created}]
    target = [{
        "id": str(row_id),
        "images": ["a.jpg", "b.jpg"],
        "meta": {"a": 2, "b": 1},
        "created_at": created.isoformat(),
    }]
    assert rows_to_upsert(source, target) == []


def test_json_value_change_is_detected():
    source = [{"id": "a", "images": ["a.jpg", "b.jpg"]}]
    target = [{"id": "a", "images": ["a.jpg"]}]
    assert [row["id"] for row in rows_to_upsert(source, target)] == ["a"]


def test_column_missing_on_target_counts_as_change():
    assert len(rows_to_upsert([{"id": "a", "views": 3}], [{"id": "a"}])) == 1


def test_normalize_value():
    assert normalize_value(Decimal("12.50")) == "12.50"
    assert normalize_value([1, 2]) == "[1, 2]"
    assert normalize_value(None) is None
    assert normalize_value(memoryview(b"ab")) == b"ab"


def test_same_instant_in_different_time_zones_is_not_a_change():
    utc = datetime(2024, 1, 5, 2, 30, tzinfo=timezone.utc)
    ist = utc.astimezone(timezone(timedelta(hours=5, minutes=30)))
    source = [{"id": "b1", "updated_at": utc}]
    target = [{"id": "b1", "updated_at": ist}]
    assert rows_to_upsert(source, target) == []


def test_later_instant_is_still_a_change():
    utc = datetime(2024, 1, 5, 2, 30, tzinfo=timezone.utc)
    source = [{"id": "b1", "updated_at": utc + timedelta(minutes=1)}]
    target = [{"id": "b1", "updated_at": utc}]
    assert len(rows_to_upsert(source, target)) == 1


def test_written_json_text_compares_equal_to_the_source_object():
    meta = {"b": 1, "a": {"z": [1, 2], "y": None}}
    assert normalize_value(meta) == normalize_value(encode_value(meta))
    assert rows_to_upsert([{"id": "p1", "meta": meta}], [{"id": "p1", "meta": encode_value(meta)}]) == []
