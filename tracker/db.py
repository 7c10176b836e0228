from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Union

import streamlit as st

from tracker.errors import StoreReadError, StoreWriteError
from tracker.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


def connect(db_path: Union[Path, str]) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return connect(db_path)


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    cols = [r["name"] for r in rows]
    return column in cols


def ensure_schema(conn: sqlite3.Connection) -> None:
    # Create base schema (for new installs)
    conn.executescript(SCHEMA_SQL)

    # ---- migrations for existing installs ----
    # Executives created before contact numbers were captured
    if not _column_exists(conn, "executives", "phone"):
        conn.execute("ALTER TABLE executives ADD COLUMN phone TEXT;")

    if not _column_exists(conn, "daily_entries", "last_updated"):
        conn.execute("ALTER TABLE daily_entries ADD COLUMN last_updated TEXT;")

    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    try:
        cur = conn.execute(sql, tuple(params))
        rows = cur.fetchall()
        cur.close()
    except sqlite3.Error as e:
        logger.exception("Store read failed")
        raise StoreReadError("Unable to load data.") from e
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    try:
        cur = conn.execute(sql, tuple(params))
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("Store write failed")
        raise StoreWriteError("Failed to save changes.") from e
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


def x_many(conn: sqlite3.Connection, statements: Iterable[tuple[str, Iterable[Any]]]) -> None:
    """Run several writes under one commit (an entry update plus its edit rows)."""
    try:
        for sql, params in statements:
            conn.execute(sql, tuple(params))
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("Store write failed")
        raise StoreWriteError("Failed to save changes.") from e
