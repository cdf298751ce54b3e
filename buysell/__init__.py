"""
buysell - active-record base class for the buy/sell feature.

Records map one table row to named fields and generate the standard
single-row SELECT / INSERT / UPDATE / DELETE statements from column metadata
supplied by subclasses. Statements run through a shared psycopg connection
pool; database failures are reported through `DbRecord.error_msg` rather than
raised.
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

# Public API exports
from buysell.config import Settings, get_settings
from buysell.domain.record import DbRecord, FieldError
from buysell.domain.schema import SchemaError, TableSchema
from buysell.domain.statements import Statement, escape
from buysell.infrastructure.database import Database, DatabaseError, get_database
from buysell.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Records
    "DbRecord",
    "FieldError",
    "SchemaError",
    "TableSchema",
    "Statement",
    "escape",
    # Database
    "Database",
    "DatabaseError",
    "get_database",
    # Logging
    "configure_logging",
    "get_logger",
]
