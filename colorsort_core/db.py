from __future__ import annotations

import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from typing import Optional

from .config import debug_log


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except OSError as e:
        debug_log('db', f'cannot use {db_path}: {e}')
    candidates = [
        os.getenv('COLORSORT_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        tempfile.gettempdir(),
    ]
    base = os.path.basename(db_path) or 'colorsort.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    # Last resort: current working directory
    return base


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds').replace('+00:00', 'Z')


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Creates the key-value and solver cache tables if missing."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS solutions (
            key TEXT PRIMARY KEY,
            optimal INTEGER NOT NULL,
            solved_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    resolved = _resolve_db_path(db_path)
    _ensure_db_dir(resolved)
    conn = sqlite3.connect(resolved)
    _ensure_db(conn)
    return conn


def kv_load(db_path: str, key: str) -> Optional[str]:
    """Reads a stored blob, None when the key was never saved."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row[0])
    finally:
        conn.close()


def kv_save(db_path: str, key: str, value: str) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value, _now()),
        )
        conn.commit()
    finally:
        conn.close()


def db_lookup_solution(db_path: str, key: str) -> Optional[int]:
    """Looks up a proven optimal move count by layout hash."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT optimal FROM solutions WHERE key = ?", (key,)).fetchone()
        return None if row is None else int(row[0])
    finally:
        conn.close()


def db_store_solution(db_path: str, key: str, optimal: int) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            "INSERT OR REPLACE INTO solutions (key, optimal, solved_at) VALUES (?, ?, ?)",
            (key, int(optimal), _now()),
        )
        conn.commit()
    finally:
        conn.close()
