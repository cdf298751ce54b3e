"""
Active-record base class for the buy/sell tables.

`DbRecord` holds one row of a table: its field values, the columns forming
the primary key, and the auto-generated columns that are never written. From
that metadata it builds and runs the standard single-row statements:

    class Item(DbRecord):
        def __init__(self, db=None):
            super().__init__(
                "items",
                {"id": "", "name": "", "price": ""},
                primary_key=["id"],
                auto_fields=["id"],
                db=db,
            )

    item = Item()
    item["id"] = "7"
    if not item.read_record():
        print(item.error_msg)

Database failures never raise out of the CRUD methods: they return False and
leave the driver's message in `error_msg`. Access to an unknown field raises
`FieldError`.
"""

from __future__ import annotations

import logging
import pprint
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

import psycopg

from buysell.domain.schema import TableSchema
from buysell.domain.statements import (
    Statement,
    delete_statement,
    insert_statement,
    select_statement,
    update_statement,
    where_clause,
)
from buysell.infrastructure.database import Database, DatabaseError, get_database
from buysell.utils.logging import get_logger

log = get_logger(__name__)

NO_SUCH_RECORD = "No such record found."
NO_ROWS_AFFECTED = "No rows affected."
NO_PRIMARY_KEY = "No primary key defined."


class FieldError(KeyError):
    """Raised on access to a field the record does not define, or on removal."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DbRecord:
    """
    One database row mapped to named fields.

    Parameters
    ----------
    table_name : str
        Table or view the record maps to.
    fields : mapping
        Column name -> default value, in column order. The defaults are the
        values `clear()` restores.
    primary_key : iterable of str
        Columns that identify the row in WHERE predicates. Empty for tables
        that are only ever inserted into; read, write and delete then fail.
    auto_fields : iterable of str
        Columns left out of INSERT and UPDATE (e.g. serial ids).
    db : Database, optional
        Handle used to run statements. Defaults to the shared handle.
    """

    def __init__(
        self,
        table_name: str,
        fields: Mapping[str, Any],
        primary_key: Iterable[str],
        auto_fields: Iterable[str] = (),
        db: Optional[Database] = None,
    ) -> None:
        self._schema = TableSchema.build(table_name, fields, primary_key, auto_fields)
        self._fields: Dict[str, Any] = dict(self._schema.columns)
        self._defaults: Dict[str, Any] = dict(self._schema.columns)
        self._error_msg = ""
        self._db = db

    # -- metadata -----------------------------------------------------------

    @property
    def schema(self) -> TableSchema:
        return self._schema

    @property
    def table_name(self) -> str:
        return self._schema.table

    @property
    def primary_key(self) -> tuple[str, ...]:
        return self._schema.primary_key

    @property
    def auto_fields(self) -> tuple[str, ...]:
        return self._schema.auto_fields

    @property
    def db(self) -> Database:
        if self._db is None:
            self._db = get_database()
        return self._db

    @property
    def error_msg(self) -> str:
        """Message of the last failed operation, or an empty string."""
        return self._error_msg

    # -- field access -------------------------------------------------------

    def get(self, name: str) -> Any:
        if name not in self._fields:
            raise FieldError(f"{name} is not a recognised field.")
        return self._fields[name]

    def set(self, name: str, value: Any) -> None:
        if name not in self._fields:
            raise FieldError(f"{name} is not a recognised field.")
        self._fields[name] = value

    def has(self, name: str) -> bool:
        return name in self._fields

    def unset(self, name: str) -> None:
        """Fields belong to the table definition and can never be removed."""
        raise FieldError(f"{name} cannot be unset.")

    __getitem__ = get
    __setitem__ = set
    __contains__ = has
    __delitem__ = unset

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._fields)

    def populate(self, row: Mapping[str, Any]) -> None:
        """Copy the values of recognised fields from `row`; other keys are ignored."""
        for name, value in row.items():
            if name in self._fields:
                self._fields[name] = value

    def clear(self) -> None:
        """Restore construction-time values and forget the last error."""
        self._fields = dict(self._defaults)
        self._error_msg = ""

    # -- statements ---------------------------------------------------------

    def where_clause(self) -> Statement:
        return where_clause(self.primary_key, self._fields)

    def select_statement(self) -> Statement:
        return select_statement(self.table_name, self.primary_key, self._fields)

    def insert_statement(self) -> Statement:
        return insert_statement(self.table_name, self._fields, self.auto_fields)

    def update_statement(self) -> Statement:
        return update_statement(self.table_name, self._fields, self.primary_key, self.auto_fields)

    def delete_statement(self) -> Statement:
        return delete_statement(self.table_name, self.primary_key, self._fields)

    # -- persistence --------------------------------------------------------

    def read_record(self) -> bool:
        """Load the row addressed by the primary key into the fields."""
        self._error_msg = ""
        if not self.primary_key:
            return self._fail("read", NO_PRIMARY_KEY)
        statement = self.select_statement()
        self._log_statement("read", statement)
        try:
            row = self.db.fetch_one(statement.text, statement.params)
        except DatabaseError as exc:
            return self._fail("read", str(exc))
        if row is None:
            return self._fail("read", NO_SUCH_RECORD)
        self.populate(row)
        return True

    def write_record(self) -> bool:
        """UPDATE the row addressed by the primary key; True iff a row changed."""
        if not self.primary_key:
            return self._fail("write", NO_PRIMARY_KEY)
        return self._execute("write", self.update_statement())

    def create_record(self) -> bool:
        """INSERT the current values; True iff a row was added."""
        return self._execute("create", self.insert_statement())

    def delete_record(self) -> bool:
        """DELETE the row addressed by the primary key; True iff a row was removed."""
        if not self.primary_key:
            return self._fail("delete", NO_PRIMARY_KEY)
        return self._execute("delete", self.delete_statement())

    def _execute(self, operation: str, statement: Statement) -> bool:
        self._error_msg = ""
        self._log_statement(operation, statement)
        try:
            count = self.db.execute(statement.text, statement.params)
        except DatabaseError as exc:
            return self._fail(operation, str(exc))
        if count <= 0:
            return self._fail(operation, NO_ROWS_AFFECTED)
        return True

    def _fail(self, operation: str, message: str) -> bool:
        self._error_msg = message
        log.warning(
            "%s on %s failed: %s",
            operation,
            self.table_name,
            message,
            extra={"table": self.table_name, "operation": operation},
        )
        return False

    def _log_statement(self, operation: str, statement: Statement) -> None:
        if not log.isEnabledFor(logging.DEBUG):
            return
        extra = {"table": self.table_name, "operation": operation}
        try:
            log.debug("%s", statement.render(), extra=extra)
        except psycopg.Error:
            # Values the driver cannot quote still go to the server as bound params.
            log.debug("%s params=%r", statement.text, statement.params, extra=extra)

    # -- rendering ----------------------------------------------------------

    def __str__(self) -> str:
        return pprint.pformat(self._fields, sort_dicts=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(table={self.table_name!r}, fields={self._fields!r})"


__all__ = ["DbRecord", "FieldError", "NO_PRIMARY_KEY", "NO_ROWS_AFFECTED", "NO_SUCH_RECORD"]
