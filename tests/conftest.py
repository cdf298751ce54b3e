"""
Pytest configuration for the buy/sell record layer.

Provides fixtures for:
- Settings override for integration tests
- Database connection management
- A scratch table for record round trips
"""

from __future__ import annotations

import os
from typing import Generator

import psycopg
import pytest

from buysell.config import Settings
from buysell.infrastructure.database import Database

LISTINGS_DDL = """
    CREATE TABLE IF NOT EXISTS test_listings (
        code TEXT PRIMARY KEY,
        seller TEXT NOT NULL DEFAULT '',
        title TEXT NOT NULL DEFAULT '',
        price TEXT NOT NULL DEFAULT '0',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
"""


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "buysell"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def listings_table(db_connection: psycopg.Connection) -> Generator[str, None, None]:
    """
    Create an empty `test_listings` table for one test and drop it afterwards.
    """
    with db_connection.cursor() as cur:
        cur.execute(LISTINGS_DDL)
        cur.execute("TRUNCATE TABLE test_listings;")
    db_connection.commit()
    yield "test_listings"
    with db_connection.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS test_listings;")
    db_connection.commit()


@pytest.fixture(scope="function")
def test_database(test_dsn: str, db_connection_available: bool) -> Database:
    """
    A Database handle using dedicated connections to the test DSN.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")
    return Database(
        connection_provider=lambda: psycopg.connect(test_dsn),
        statement_timeout_ms=5_000,
    )
