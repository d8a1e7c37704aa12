import json

import pytest

from app.cli import run_cli
from app.models import Product, User


def test_reconcile_writes_json_report(primary, secondary, tmp_path):
    primary.add(Product(id="p1", name="Daypack", affiliate_link="https://example.com/1"))
    output = tmp_path / "report.json"

    run_cli(["--source-url", primary.url, "--target-url", secondary.url, "--output-json", str(output), "reconcile"])

    report = json.loads(output.read_text())
    assert report["command"] == "reconcile"
    assert report["summary"]["rows_applied"] == 1
    assert secondary.get(Product, "p1") is not None


def test_only_tables_limits_the_run(primary, secondary, capsys):
    primary.add(
        User(id="u1", name="Asha", email="asha@example.com"),
        Product(id="p1", name="Daypack", affiliate_link="https://example.com/1"),
    )

    run_cli(["--source-url", primary.url, "--target-url", secondary.url, "reconcile", "--only-tables", "products"])

    report = json.loads(capsys.readouterr().out)
    assert [result["table"] for result in report["results"]] == ["products"]
    assert secondary.get(User, "u1") is None


def test_fail_on_error_exits_with_code_2(primary, secondary):
    primary.add(User(id="u2", name="Ravi", email="ravi@example.com"))
    secondary.add(User(id="legacy", name="Ravi", email="ravi@example.com"))

    with pytest.raises(SystemExit) as exc:
        run_cli([
            "--source-url", primary.url,
            "--target-url", secondary.url,
            "--output-json", "/dev/null",
            "reconcile", "--fail-on-error",
        ])
    assert exc.value.code == 2


def test_migrate_copies_legacy_rows_without_overwriting(primary, secondary, capsys):
    # migrate reads the secondary store and writes the primary
    secondary.add(
        Product(id="p1", name="Legacy", affiliate_link="https://example.com/1"),
        Product(id="p2", name="Only legacy", affiliate_link="https://example.com/2"),
    )
    primary.add(Product(id="p1", name="Current", affiliate_link="https://example.com/1"))

    run_cli(["--source-url", secondary.url, "--target-url", primary.url, "migrate"])

    report = json.loads(capsys.readouterr().out)
    assert report["counts"]["target"]["products"] == 2
    assert primary.get(Product, "p1").name == "Current"
    assert primary.get(Product, "p2") is not None


def test_counts(primary, secondary, capsys):
    primary.add(User(id="u1", name="Asha", email="asha@example.com"))

    run_cli(["--source-url", primary.url, "--target-url", secondary.url, "counts"])

    report = json.loads(capsys.readouterr().out)
    assert report["source"]["users"] == 1
    assert report["target"]["users"] == 0


def test_unknown_table(primary, secondary):
    with pytest.raises(SystemExit):
        run_cli(["--source-url", primary.url, "--target-url", secondary.url, "reconcile", "--only-tables", "carts"])
