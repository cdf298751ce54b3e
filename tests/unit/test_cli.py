from __future__ import annotations

from typer.testing import CliRunner

from buysell.main import app

runner = CliRunner()

ITEM_ARGS = ["items", "-f", "id", "-f", "name=Coin", "-f", "price=5", "-k", "id", "-a", "id"]


def test_sql_prints_all_four_statements():
    result = runner.invoke(app, ["sql", *ITEM_ARGS])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "SELECT * FROM items WHERE id=''",
        "INSERT INTO items (name, price) VALUES ('Coin', '5')",
        "UPDATE items SET name='Coin', price='5' WHERE id=''",
        "DELETE FROM items WHERE id=''",
    ]


def test_sql_rejects_key_outside_fields():
    result = runner.invoke(app, ["sql", "items", "-f", "name=Coin", "-k", "id"])

    assert result.exit_code == 2
    assert "missing from fields" in result.output


def test_sql_rejects_field_without_name():
    result = runner.invoke(app, ["sql", "items", "-f", "=Coin", "-k", "id"])

    assert result.exit_code == 2


def test_info_shows_database_target():
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "DB=" in result.output
    assert "timeout_ms=" in result.output
