"""
Low-level database helpers (Postgres-only).
"""
from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

try:
    import psycopg
    from psycopg.conninfo import make_conninfo
    from psycopg.rows import dict_row
except Exception as exc:  # pragma: no cover - required dependency
    raise RuntimeError("psycopg is required for Postgres") from exc

log = logging.getLogger("db")

_POSTGRES_VARS = ["POSTGRES_HOST", "POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD"]


def resolve_database_url() -> str:
    """
    Return a libpq connection string.

    DATABASE_URL wins when set; otherwise the POSTGRES_* variables are combined.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        if url.startswith("postgres://") or url.startswith("postgresql://"):
            return url
        raise RuntimeError("DATABASE_URL must start with postgres:// or postgresql://")

    missing = [name for name in _POSTGRES_VARS if not os.getenv(name)]
    if missing:
        raise RuntimeError(
            "Missing required PostgreSQL environment variables: "
            + ", ".join(missing)
            + ". Set DATABASE_URL or the POSTGRES_* variables in .env or the environment."
        )

    ssl = os.getenv("POSTGRES_SSL", "false").lower() == "true"
    return make_conninfo(
        host=os.getenv("POSTGRES_HOST"),
        port=int(os.getenv("POSTGRES_PORT") or "5432"),
        dbname=os.getenv("POSTGRES_DB"),
        user=os.getenv("POSTGRES_USER"),
        password=os.getenv("POSTGRES_PASSWORD"),
        sslmode="require" if ssl else "prefer",
    )


def _convert_qmarks(sql: str) -> str:
    if "?" not in sql:
        return sql
    return sql.replace("?", "%s")


class _CursorWrapper:
    def __init__(self, cursor):
        self._cursor = cursor

    def execute(self, sql: str, params: Iterable | None = None):
        sql = _convert_qmarks(sql)
        if params is None:
            return self._cursor.execute(sql)
        return self._cursor.execute(sql, params)

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self):
        return self._cursor.fetchall()

    @property
    def rowcount(self):
        return getattr(self._cursor, "rowcount", 0)


class _ConnWrapper:
    def __init__(self, conn):
        self._conn = conn

    def cursor(self):
        return _CursorWrapper(self._conn.cursor())

    def commit(self):
        return self._conn.commit()

    def rollback(self):
        return self._conn.rollback()

    def close(self):
        return self._conn.close()


def get_conn(database_url: Optional[str] = None):
    """
    Return a Postgres DB connection with dict rows.
    """
    url = database_url or resolve_database_url()
    conn = psycopg.connect(url, row_factory=dict_row)
    info = conn.info
    log.info(
        "Connected to Postgres",
        extra={"host": info.host, "dbname": info.dbname, "user": info.user},
    )
    return _ConnWrapper(conn)


__all__ = ["get_conn", "resolve_database_url"]
