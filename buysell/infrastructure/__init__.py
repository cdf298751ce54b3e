"""
Infrastructure package for the buy/sell record layer.

Centralizes database connectivity (pooling, retrying connects) and the
`Database` handle records execute through. Keep this layer focused on I/O
and resource management.
"""

from buysell.infrastructure.database import Database, DatabaseError, get_database
from buysell.infrastructure.db_factory import (
    PoolManager,
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
    get_sync_pool,
)

__all__ = [
    "Database",
    "DatabaseError",
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
    "get_database",
    "get_sync_connection",
    "get_sync_pool",
]
