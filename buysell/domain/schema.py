"""
Table metadata for records.

A `TableSchema` names the table, its columns with their default values, the
primary-key columns and the auto-generated columns excluded from writes.
Identifiers are validated here because the statement builders interpolate
them into SQL text.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TABLE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class SchemaError(ValueError):
    """Raised when record metadata is inconsistent or unsafe."""


def _error_message(error) -> str:
    cause = error.get("ctx", {}).get("error")
    return str(cause) if cause is not None else error["msg"]


class TableSchema(BaseModel):
    """
    Static description of the table a record maps to.
    """

    table: str = Field(..., description="Table or view name, optionally schema-qualified.")
    columns: Dict[str, Any] = Field(..., description="Column name -> default value, in column order.")
    primary_key: Tuple[str, ...] = Field(..., description="Columns that identify one row; empty for insert-only tables.")
    auto_fields: Tuple[str, ...] = Field((), description="Columns never written by INSERT/UPDATE.")

    model_config = {
        "frozen": True,
    }

    @field_validator("table")
    @classmethod
    def _check_table(cls, value: str) -> str:
        if not _TABLE.match(value):
            raise ValueError(f"invalid table name: {value!r}")
        return value

    @field_validator("columns")
    @classmethod
    def _check_columns(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if not value:
            raise ValueError("a record needs at least one field")
        for name in value:
            if not _IDENTIFIER.match(name):
                raise ValueError(f"invalid column name: {name!r}")
        return value

    @model_validator(mode="after")
    def _check_key_columns(self) -> "TableSchema":
        for label, names in (("primary key", self.primary_key), ("auto", self.auto_fields)):
            unknown = [name for name in names if name not in self.columns]
            if unknown:
                raise ValueError(f"{label} column(s) missing from fields: {', '.join(unknown)}")
        return self

    @classmethod
    def build(cls, table, fields, primary_key, auto_fields=()) -> "TableSchema":
        """Validate metadata, raising `SchemaError` instead of pydantic's error."""
        try:
            return cls(
                table=table,
                columns=dict(fields),
                primary_key=tuple(primary_key),
                auto_fields=tuple(auto_fields),
            )
        except ValidationError as exc:
            messages = "; ".join(_error_message(error) for error in exc.errors())
            raise SchemaError(f"invalid schema for {table!r}: {messages}") from exc


__all__ = ["SchemaError", "TableSchema"]
