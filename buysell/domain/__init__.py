"""
Domain package for the buy/sell record layer.

Exports the record base class, its table metadata and the statement
builders. Keep this package free of connection management.
"""

from buysell.domain.record import DbRecord, FieldError
from buysell.domain.schema import SchemaError, TableSchema
from buysell.domain.statements import (
    Statement,
    delete_statement,
    escape,
    insert_statement,
    select_statement,
    update_statement,
    where_clause,
)

__all__ = [
    "DbRecord",
    "FieldError",
    "SchemaError",
    "Statement",
    "TableSchema",
    "delete_statement",
    "escape",
    "insert_statement",
    "select_statement",
    "update_statement",
    "where_clause",
]
