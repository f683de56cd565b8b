"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper takes an optional `conn=`; pass the connection yielded by
`transaction()` to run the statement inside that transaction.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    # Hosted Postgres URLs often carry ?sslmode=require, which asyncpg rejects as a DSN param.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.env_int("DB_POOL_MIN_SIZE", 1),
        max_size=settings.env_int("DB_POOL_MAX_SIZE", 5),
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


def _executor(conn: asyncpg.Connection | None) -> asyncpg.Pool | asyncpg.Connection:
    return conn if conn is not None else pool()


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Acquire one connection and run everything on it in a single transaction.

    The transaction commits when the block exits normally and rolls back if
    it raises.
    """
    async with pool().acquire() as conn:
        async with conn.transaction():
            yield conn


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await _executor(conn).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await _executor(conn).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL).

    Returns asyncpg's status tag, e.g. "DELETE 1".
    """
    return await _executor(conn).execute(sql, *args)


async def execute_many(
    sql: str,
    rows: Iterable[Sequence[Any]],
    *,
    conn: asyncpg.Connection | None = None,
) -> None:
    """
    Run one statement once per argument tuple in `rows`.
    """
    rows = list(rows)
    if not rows:
        return None
    await _executor(conn).executemany(sql, rows)


def affected_rows(status_tag: str) -> int:
    """
    Parse the row count from a status tag like "UPDATE 3" or "INSERT 0 1".
    """
    try:
        return int((status_tag or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0
