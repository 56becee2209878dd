"""Favorites table schema and shared SQLite table helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path


TABLE_NAME = "favorites"
BACKUP_TABLE_NAME = "favorites_bakup"

CONTAINER_UNKNOWN = -1

FAVORITES_COLUMNS = (
    "_id",
    "title",
    "intent",
    "container",
    "screen",
    "cellX",
    "cellY",
    "spanX",
    "spanY",
    "itemType",
    "appWidgetId",
    "iconPackage",
    "iconResource",
    "icon",
    "appWidgetProvider",
    "modified",
    "restored",
    "profileId",
    "rank",
    "options",
    "appWidgetSource",
)


def _connect(db_path):
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Long-lived connections are shared across request threads behind one lock.
    conn = sqlite3.connect(str(path), timeout=5.0, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    return conn


def create_favorites_table(conn, owner_serial, optional=False, table_name=TABLE_NAME):
    """Create a favorites-shaped table whose rows default to ``owner_serial``."""
    if_not_exists = "IF NOT EXISTS " if optional else ""
    conn.execute(
        f"""
        CREATE TABLE {if_not_exists}{table_name} (
            _id INTEGER PRIMARY KEY,
            title TEXT,
            intent TEXT,
            container INTEGER,
            screen INTEGER,
            cellX INTEGER,
            cellY INTEGER,
            spanX INTEGER,
            spanY INTEGER,
            itemType INTEGER,
            appWidgetId INTEGER NOT NULL DEFAULT -1,
            iconPackage TEXT,
            iconResource TEXT,
            icon BLOB,
            appWidgetProvider TEXT,
            modified INTEGER NOT NULL DEFAULT 0,
            restored INTEGER NOT NULL DEFAULT 0,
            profileId INTEGER DEFAULT {int(owner_serial)},
            rank INTEGER NOT NULL DEFAULT 0,
            options INTEGER NOT NULL DEFAULT 0,
            appWidgetSource INTEGER NOT NULL DEFAULT {CONTAINER_UNKNOWN}
        )
        """
    )


def table_exists(conn, table_name):
    """Return True when ``table_name`` exists in the connection's main schema."""
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? LIMIT 1",
        (table_name,),
    ).fetchone()
    return row is not None


def drop_table(conn, table_name):
    conn.execute(f"DROP TABLE IF EXISTS {table_name}")


def get_schema_version(conn):
    """Read the per-connection schema version (``PRAGMA user_version``)."""
    row = conn.execute("PRAGMA user_version").fetchone()
    return int(row[0]) if row is not None else 0


def set_schema_version(conn, version):
    conn.execute(f"PRAGMA user_version = {int(version)}")


def database_path(conn):
    """Return the file backing the connection's main schema, or '' when in-memory."""
    for row in conn.execute("PRAGMA database_list").fetchall():
        if row[1] == "main":
            return str(row[2] or "")
    return ""
