"""
Database handle used by records.

`Database` wraps a connection provider (the shared pool by default) and
exposes the two calls records need: fetch one row, or execute a write and
report the affected-row count. Driver failures are re-raised as
`DatabaseError` carrying the driver's message.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Sequence

import psycopg
from psycopg.rows import dict_row

from buysell.config import get_settings
from buysell.infrastructure.db_factory import PoolManager, apply_statement_timeout
from buysell.utils.logging import get_logger

log = get_logger(__name__)

ConnectionProvider = Callable[[], AbstractContextManager[psycopg.Connection]]


class DatabaseError(Exception):
    """Custom exception for database operations."""


def _driver_message(exc: psycopg.Error) -> str:
    diag = getattr(exc, "diag", None)
    primary = getattr(diag, "message_primary", None) if diag is not None else None
    return primary or str(exc).strip() or exc.__class__.__name__


class Database:
    """
    Executes single statements on connections handed out by a provider.

    Parameters
    ----------
    connection_provider : callable, optional
        Zero-argument callable returning a context manager that yields a
        psycopg connection. Defaults to the PoolManager pool.
    statement_timeout_ms : int, optional
        Applied to each connection before the statement runs (default from
        settings; 0 disables).
    """

    def __init__(
        self,
        connection_provider: Optional[ConnectionProvider] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        self._connection = connection_provider or PoolManager().sync_connection
        if statement_timeout_ms is None:
            statement_timeout_ms = get_settings().db_statement_timeout_ms
        self.statement_timeout_ms = statement_timeout_ms

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Execute a query and return its first row as a dict, or None."""
        try:
            with self._connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    apply_statement_timeout(cur, self.statement_timeout_ms)
                    cur.execute(query, params)
                    row = cur.fetchone()
                log.debug("Fetch one executed, result: %s", "found" if row else "not found")
                return row
        except psycopg.Error as exc:
            log.error("fetch_one failed: %s", exc)
            raise DatabaseError(_driver_message(exc)) from exc

    def execute(self, query: str, params: Sequence[Any] = ()) -> int:
        """Execute a data-modifying statement, commit, and return the affected-row count."""
        try:
            with self._connection() as conn:
                with conn.cursor() as cur:
                    apply_statement_timeout(cur, self.statement_timeout_ms)
                    cur.execute(query, params)
                    count = max(cur.rowcount, 0)
                conn.commit()
                log.debug("Statement executed, affected rows: %d", count)
                return count
        except psycopg.Error as exc:
            log.error("execute failed: %s", exc)
            raise DatabaseError(_driver_message(exc)) from exc


@lru_cache(maxsize=1)
def get_database() -> Database:
    """
    Return the process-wide Database handle backed by the shared pool.
    """
    return Database()


__all__ = ["ConnectionProvider", "Database", "DatabaseError", "get_database"]
