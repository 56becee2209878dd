"""Backup and restore of the favorites table into a separate table.

The backup lives either in the same database as the live favorites table or in a
second SQLite file. Besides the copied rows it carries one metadata row at
``ID_PROPERTY`` recording the schema version, the grid geometry and an options
bitmask; that row is what decides whether a stored backup can be trusted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from gridbackup.core.favorites_schema import (
    BACKUP_TABLE_NAME,
    TABLE_NAME,
    create_favorites_table,
    database_path,
    drop_table,
    get_schema_version,
    table_exists,
)


ID_PROPERTY = -1

KEY_HOTSEAT_SIZE = "screen"
KEY_GRID_X_SIZE = "spanX"
KEY_GRID_Y_SIZE = "spanY"
KEY_DB_VERSION = "rank"
KEY_OPTIONS = "options"

OPTION_REQUIRES_SANITIZATION = 1

_ATTACH_ALIAS = "from_db"


class BackupStatus(enum.Enum):
    """Classification of the stored backup, recomputed on every load."""

    # No backup table, no metadata row, or a schema version mismatch.
    NOT_FOUND = "not_found"
    # Not sanitized yet: may still reference apps that are no longer installed.
    RAW = "raw"
    # Already sanitized, usable as-is.
    SANITIZED = "sanitized"


@dataclass(frozen=True)
class GridSize:
    hotseat_size: int
    grid_x: int
    grid_y: int


def _log(log_action, action, message):
    if callable(log_action):
        log_action(action, rejection_message=message)


def copy_table(from_conn, from_table, to_conn, to_table, owner_serial):
    """Replace ``to_table`` with the data rows of ``from_table``.

    The destination is dropped and recreated with the favorites schema first. When
    the two connections differ the source database is attached to the destination
    connection for the duration of the copy only. The metadata row is never copied.
    """
    drop_table(to_conn, to_table)
    create_favorites_table(to_conn, owner_serial, optional=False, table_name=to_table)
    to_conn.commit()

    if from_conn is to_conn:
        _insert_rows(to_conn, from_table, to_table)
        return

    source_path = database_path(from_conn)
    if not source_path:
        raise ValueError("Cannot attach an in-memory source database.")
    to_conn.execute(f"ATTACH DATABASE ? AS {_ATTACH_ALIAS}", (source_path,))
    try:
        _insert_rows(to_conn, f"{_ATTACH_ALIAS}.{from_table}", to_table)
    finally:
        to_conn.execute(f"DETACH DATABASE {_ATTACH_ALIAS}")


def _insert_rows(conn, qualified_source, to_table):
    try:
        conn.execute(
            f"INSERT INTO {to_table} SELECT * FROM {qualified_source} WHERE _id > ?",
            (ID_PROPERTY,),
        )
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def encode_db_properties(conn, table, version, grid_x, grid_y, hotseat_size, options):
    """Write (or overwrite) the metadata row of ``table``."""
    conn.execute(
        f"""
        INSERT OR REPLACE INTO {table} (
            _id,
            {KEY_DB_VERSION},
            {KEY_GRID_X_SIZE},
            {KEY_GRID_Y_SIZE},
            {KEY_HOTSEAT_SIZE},
            {KEY_OPTIONS}
        )
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (ID_PROPERTY, int(version), int(grid_x), int(grid_y), int(hotseat_size), int(options)),
    )
    conn.commit()


def decode_db_properties(conn, table, expected_version, log_action=None):
    """Classify the backup in ``table`` and return ``(status, recorded GridSize)``.

    The grid size is None unless the status is RAW or SANITIZED.
    """
    if not table_exists(conn, table):
        _log(log_action, "grid-backup-table-missing", f"Backup table {table} not found.")
        return BackupStatus.NOT_FOUND, None
    row = conn.execute(
        f"""
        SELECT {KEY_DB_VERSION}, {KEY_GRID_X_SIZE}, {KEY_GRID_Y_SIZE}, {KEY_HOTSEAT_SIZE}, {KEY_OPTIONS}
        FROM {table}
        WHERE _id = ?
        LIMIT 1
        """,
        (ID_PROPERTY,),
    ).fetchone()
    if row is None:
        _log(log_action, "grid-backup-metadata-missing", "Meta data not found in backup table.")
        return BackupStatus.NOT_FOUND, None
    if not validate_db_version(expected_version, row[0], log_action=log_action):
        return BackupStatus.NOT_FOUND, None

    grid_size = GridSize(
        hotseat_size=int(row[3] or 0),
        grid_x=int(row[1] or 0),
        grid_y=int(row[2] or 0),
    )
    is_sanitized = (int(row[4] or 0) & OPTION_REQUIRES_SANITIZATION) == 0
    return (BackupStatus.SANITIZED if is_sanitized else BackupStatus.RAW), grid_size


def validate_db_version(expected, actual, log_action=None):
    """Return True only when the recorded schema version equals ``expected``."""
    if actual is not None and int(expected) == int(actual):
        return True
    _log(
        log_action,
        "grid-backup-version-mismatch",
        f"Launcher db version mismatch, expecting {expected} but {actual} was found.",
    )
    return False


class GridBackupTable:
    """Decide between creating, restoring or ignoring the favorites backup."""

    def __init__(
        self,
        favorites_db,
        backup_db,
        hotseat_size,
        grid_x,
        grid_y,
        *,
        owner_serial_resolver,
        was_empty_db_created,
        log_action=None,
    ):
        self.favorites_db = favorites_db
        self.backup_db = backup_db
        self.grid_size = GridSize(int(hotseat_size), int(grid_x), int(grid_y))
        self.restored_grid_size = GridSize(0, 0, 0)
        self._owner_serial_resolver = owner_serial_resolver
        self._was_empty_db_created = was_empty_db_created
        self._log_action = log_action

    def backup_or_restore_as_needed(self):
        """Create a backup when none exists, otherwise restore a sanitized one.

        A backup created here is always sanitized. Returns True only when the live
        table was replaced from the backup.
        """
        if not table_exists(self.backup_db, BACKUP_TABLE_NAME):
            if self._was_empty_db_created():
                # Nothing worth preserving yet.
                return False
            self.do_backup(self._owner_serial_resolver(), 0)
            return False
        if self.load_db_properties() is not BackupStatus.SANITIZED:
            return False
        copy_table(
            self.backup_db,
            BACKUP_TABLE_NAME,
            self.favorites_db,
            TABLE_NAME,
            self._owner_serial_resolver(),
        )
        _log(self._log_action, "grid-backup-restored", "Backup table found.")
        return True

    def restore_from_raw_backup_if_available(self, old_profile_id):
        """Restore a raw backup recorded with exactly the current grid size."""
        if (
            not table_exists(self.backup_db, BACKUP_TABLE_NAME)
            or self.load_db_properties() is not BackupStatus.RAW
            or self.restored_grid_size != self.grid_size
        ):
            return False
        copy_table(self.backup_db, BACKUP_TABLE_NAME, self.favorites_db, TABLE_NAME, old_profile_id)
        _log(self._log_action, "grid-backup-raw-restored", "Backup restored.")
        return True

    def do_backup(self, profile_id, options):
        """Snapshot the favorites table and stamp it with ``options``."""
        copy_table(self.favorites_db, TABLE_NAME, self.backup_db, BACKUP_TABLE_NAME, profile_id)
        encode_db_properties(
            self.backup_db,
            BACKUP_TABLE_NAME,
            get_schema_version(self.favorites_db),
            self.grid_size.grid_x,
            self.grid_size.grid_y,
            self.grid_size.hotseat_size,
            options,
        )

    def load_db_properties(self):
        """Classify the stored backup; remembers its grid size when usable."""
        status, grid_size = decode_db_properties(
            self.backup_db,
            BACKUP_TABLE_NAME,
            get_schema_version(self.favorites_db),
            log_action=self._log_action,
        )
        if grid_size is not None:
            self.restored_grid_size = grid_size
        return status

    def get_restore_hotseat_and_grid_size(self):
        """Return ``(hotseat_size, (grid_x, grid_y))`` of the last loaded backup."""
        restored = self.restored_grid_size
        return restored.hotseat_size, (restored.grid_x, restored.grid_y)
