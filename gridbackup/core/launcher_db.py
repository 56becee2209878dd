"""Live launcher database helper.

Opens the favorites database, creates the favorites table on first use and
remembers whether that produced an empty database. The flag is kept in memory
for the lifetime of the helper.
"""

from __future__ import annotations

from gridbackup.core.favorites_schema import (
    TABLE_NAME,
    _connect,
    create_favorites_table,
    get_schema_version,
    set_schema_version,
    table_exists,
)


class LauncherDbHelper:
    """Own the live favorites connection and the optional backup connection."""

    def __init__(self, db_path, schema_version, owner_serial, backup_db_path=None, log_exception=None):
        self.db_path = db_path
        self.backup_db_path = backup_db_path
        self.schema_version = int(schema_version)
        self.owner_serial = int(owner_serial)
        self.log_exception = log_exception
        self.favorites_db = None
        self.backup_db = None
        self._empty_db_created = False

    def open(self):
        """Open (and create when missing) the live database, then the backup one."""
        if self.favorites_db is not None:
            return self.favorites_db, self.backup_db
        conn = _connect(self.db_path)
        try:
            if not table_exists(conn, TABLE_NAME):
                create_favorites_table(conn, self.owner_serial, optional=True)
                self._empty_db_created = True
            if get_schema_version(conn) != self.schema_version:
                set_schema_version(conn, self.schema_version)
            conn.commit()
        except Exception as exc:
            conn.close()
            if callable(self.log_exception):
                self.log_exception("launcher_db/open", exc)
            raise
        self.favorites_db = conn
        if self.backup_db_path and str(self.backup_db_path) != str(self.db_path):
            self.backup_db = _connect(self.backup_db_path)
        else:
            self.backup_db = conn
        return self.favorites_db, self.backup_db

    def was_empty_db_created(self):
        """Return True when ``open`` had to create an empty favorites table."""
        return self._empty_db_created

    def clear_empty_db_created_flag(self):
        self._empty_db_created = False

    def close(self):
        if self.backup_db is not None and self.backup_db is not self.favorites_db:
            self.backup_db.close()
        if self.favorites_db is not None:
            self.favorites_db.close()
        self.favorites_db = None
        self.backup_db = None
