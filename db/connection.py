"""
db/connection.py
----------------
Owns the psycopg2 connection pool and hands out cursors to repositories.

Repositories never hold a connection beyond a single `with` block:
    with transaction() as cur:
        cur.execute(sql, params)
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import cursor as Cursor

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

# psycopg2 binds positional parameters with %s
PARAMSTYLE = "format"

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Open the connection pool. Calling it again is a no-op.

    Args:
        min_conn: Connections opened up front (DB_POOL_MIN by default).
        max_conn: Upper bound on open connections (DB_POOL_MAX by default).

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, DATABASE_URL)
        logger.info(f"Connection pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


def get_connection():
    """
    Borrow a connection from the pool.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Give a borrowed connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def cursor() -> Iterator[Cursor]:
    """Cursor for read-only queries; nothing is committed."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        release_connection(conn)


@contextmanager
def transaction() -> Iterator[Cursor]:
    """
    Cursor whose work is committed when the block exits cleanly.

    Any exception rolls the connection back and propagates unchanged.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")
