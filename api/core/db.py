"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`) when the postgres store backend is
selected.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=1,
        max_size=5,
        command_timeout=30,
    )


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


Executor = asyncpg.Pool | asyncpg.Connection


@asynccontextmanager
async def transaction(*, isolation: str = "read_committed") -> AsyncIterator[asyncpg.Connection]:
    """
    Hold one pooled connection inside a transaction.

    Pass the yielded connection as `conn=` to the helpers below so several
    statements read the same snapshot (use isolation="repeatable_read").
    """
    async with pool().acquire() as conn:
        async with conn.transaction(isolation=isolation):
            yield conn


def _executor(conn: Executor | None) -> Executor:
    return conn if conn is not None else pool()


async def fetch_one(sql: str, *args: Any, conn: Executor | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await _executor(conn).fetchrow(sql, *args)
    return dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: Executor | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await _executor(conn).fetch(sql, *args)
    return [dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any, conn: Executor | None = None) -> Any:
    """
    Run a query and return the first column of the first row.
    """
    return await _executor(conn).fetchval(sql, *args)


async def execute(sql: str, *args: Any, conn: Executor | None = None) -> str:
    """
    Run a statement (INSERT/DELETE/DDL). Returns the command status tag,
    e.g. "DELETE 1".
    """
    return await _executor(conn).execute(sql, *args)
