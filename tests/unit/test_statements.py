from __future__ import annotations

import pytest

from buysell.domain.statements import (
    Statement,
    delete_statement,
    escape,
    insert_statement,
    select_statement,
    update_statement,
    where_clause,
)

ITEM_VALUES = {"id": "", "name": "Coin", "price": "5"}


@pytest.mark.parametrize(
    ("primary_key", "expected"),
    [
        (["a"], "WHERE a=%s"),
        (["a", "b"], "WHERE a=%s AND b=%s"),
        (["a", "b", "c"], "WHERE a=%s AND b=%s AND c=%s"),
    ],
)
def test_where_clause_joins_key_columns_with_and(primary_key, expected):
    values = {"a": "1", "b": "2", "c": "3", "other": "x"}

    clause = where_clause(primary_key, values)

    assert clause.text == expected
    assert not clause.text.rstrip().endswith("AND")
    assert clause.params == tuple(values[column] for column in primary_key)


def test_where_clause_renders_escaped_literals():
    clause = where_clause(["seller", "code"], {"seller": "o'neil", "code": "C1"})

    assert clause.render() == "WHERE seller='o''neil' AND code='C1'"


def test_insert_matches_items_example():
    statement = insert_statement("items", ITEM_VALUES, ["id"])

    assert statement.text == "INSERT INTO items (name, price) VALUES (%s, %s)"
    assert statement.params == ("Coin", "5")
    assert statement.render() == "INSERT INTO items (name, price) VALUES ('Coin', '5')"


def test_insert_without_auto_columns_writes_every_field():
    statement = insert_statement("items", ITEM_VALUES)

    assert statement.text == "INSERT INTO items (id, name, price) VALUES (%s, %s, %s)"
    assert statement.params == ("", "Coin", "5")


def test_update_sets_non_auto_columns_and_binds_key_last():
    values = {"id": "7", "name": "Coin", "price": "5"}

    statement = update_statement("items", values, ["id"], ["id"])

    assert statement.text == "UPDATE items SET name=%s, price=%s WHERE id=%s"
    assert statement.params == ("Coin", "5", "7")
    assert statement.render() == "UPDATE items SET name='Coin', price='5' WHERE id='7'"


def test_update_never_sets_auto_columns():
    values = {"id": "7", "name": "Coin", "created_at": "now", "price": "5"}

    statement = update_statement("items", values, ["id"], ["id", "created_at"])

    set_list = statement.text.split(" WHERE ")[0]
    assert "id=" not in set_list
    assert "created_at" not in set_list


def test_select_and_delete_address_row_by_key():
    values = {"id": "7", "name": "Coin"}

    assert select_statement("items", ["id"], values).render() == "SELECT * FROM items WHERE id='7'"
    assert delete_statement("items", ["id"], values).render() == "DELETE FROM items WHERE id='7'"


def test_escape_quotes_strings_and_maps_none_to_null():
    assert escape("Coin") == "'Coin'"
    assert escape("O'Brien") == "'O''Brien'"
    assert escape(None) == "NULL"


def test_statement_without_params_renders_text_unchanged():
    statement = Statement("SELECT 1")

    assert statement.render() == "SELECT 1"
    assert str(statement) == "SELECT 1"


def test_where_clause_requires_a_primary_key():
    with pytest.raises(ValueError, match="no primary key"):
        where_clause([], {"event": "sold"})
