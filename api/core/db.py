"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper takes an optional `conn` (a pool or a single connection). When
omitted, the process-wide pool is used.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import asyncpg

from . import config

# The database listens on a fixed, non-default port.
DB_PORT = 33061

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


# Driver failures are explicit and separable from other runtime errors.
class DatabaseError(RuntimeError):
    pass


_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def database_url() -> str:
    creds = config.db_credentials()
    user = quote(creds.user, safe="")
    password = quote(creds.password, safe="")
    auth = f"{user}:{password}@" if password else f"{user}@" if user else ""
    return f"postgresql://{auth}{creds.host}:{DB_PORT}/{quote(creds.name, safe='')}"


async def init_pool() -> None:
    """
    Open the process-wide pool.

    A failure here is fatal: it is logged and re-raised so the server aborts
    startup instead of serving requests without a database.
    """
    global _pool
    if _pool is not None:
        return None
    try:
        _pool = await asyncpg.create_pool(
            dsn=database_url(),
            min_size=1,
            max_size=5,
            command_timeout=30,
        )
    except Exception:
        logger.critical("database_connect_failed host=%s port=%s", config.db_credentials().host, DB_PORT)
        raise
    logger.info("Succeeded to connect to database")


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _target(conn: Any) -> Any:
    return conn if conn is not None else pool()


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: Any = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    try:
        row = await _target(conn).fetchrow(sql, *args)
    except _DRIVER_ERRORS as e:
        raise DatabaseError(str(e) or type(e).__name__) from e
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: Any = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    try:
        rows = await _target(conn).fetch(sql, *args)
    except _DRIVER_ERRORS as e:
        raise DatabaseError(str(e) or type(e).__name__) from e
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any, conn: Any = None) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    try:
        await _target(conn).execute(sql, *args)
    except _DRIVER_ERRORS as e:
        raise DatabaseError(str(e) or type(e).__name__) from e
