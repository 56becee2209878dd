"""Flask route registration for grid backup control."""

from flask import request

from gridbackup.core.favorites_schema import BACKUP_TABLE_NAME, table_exists
from gridbackup.core.grid_backup_table import BackupStatus
from gridbackup.core.response_helpers import (
    internal_error_response,
    invalid_request_response,
    ok_response,
)
from gridbackup.services.grid_backup_runtime import backup_or_restore

# SQLite INTEGER range.
_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 63 - 1


def _request_int(name, default):
    """Read an integer from JSON body or form data; ValueError on junk or overflow."""
    payload = request.get_json(silent=True) or {}
    raw = payload.get(name) if isinstance(payload, dict) else None
    if raw is None:
        raw = request.form.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    value = int(str(raw).strip())
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"{name} out of range")
    return value


def register_grid_backup_routes(app, state):
    """Register status/backup/restore routes over ``state.grid_backup``."""

    # Route: /grid-backup/status
    @app.route("/grid-backup/status", methods=["GET"])
    def grid_backup_status():
        try:
            with state.lock:
                grid_backup = state.grid_backup
                exists = table_exists(grid_backup.backup_db, BACKUP_TABLE_NAME)
                status = grid_backup.load_db_properties() if exists else BackupStatus.NOT_FOUND
                hotseat_size, (grid_x, grid_y) = grid_backup.get_restore_hotseat_and_grid_size()
            if status is BackupStatus.NOT_FOUND:
                # Geometry from an earlier decode does not describe this backup.
                hotseat_size, grid_x, grid_y = 0, 0, 0
        except Exception as exc:
            state.log_exception("grid_backup_status", exc)
            return internal_error_response()
        return ok_response(
            exists=exists,
            status=status.name,
            hotseat_size=hotseat_size,
            grid_x=grid_x,
            grid_y=grid_y,
        )

    # Route: /grid-backup/backup
    @app.route("/grid-backup/backup", methods=["POST"])
    def grid_backup_backup():
        try:
            profile_id = _request_int("profile_id", None)
            options = _request_int("options", 0)
        except ValueError:
            state.log_action("backup", rejection_message="Invalid profile_id or options.")
            return invalid_request_response("profile_id and options must be integers.")
        if profile_id is None:
            profile_id = state.profiles.my_serial()
        try:
            with state.lock:
                state.grid_backup.do_backup(profile_id, options)
        except Exception as exc:
            state.log_exception("grid_backup_backup", exc)
            return internal_error_response()
        state.log_action("backup", command=f"profile_id={profile_id} options={options}")
        return ok_response()

    # Route: /grid-backup/restore
    @app.route("/grid-backup/restore", methods=["POST"])
    def grid_backup_restore():
        try:
            restored = backup_or_restore(state)
        except Exception as exc:
            state.log_exception("grid_backup_restore", exc)
            return internal_error_response()
        state.log_action("restore", command=f"restored={restored}")
        return ok_response(restored=restored)

    # Route: /grid-backup/restore-raw
    @app.route("/grid-backup/restore-raw", methods=["POST"])
    def grid_backup_restore_raw():
        try:
            profile_id = _request_int("profile_id", None)
        except ValueError:
            state.log_action("restore-raw", rejection_message="Invalid profile_id.")
            return invalid_request_response("profile_id must be an integer.")
        if profile_id is None:
            profile_id = state.profiles.my_serial()
        try:
            with state.lock:
                restored = state.grid_backup.restore_from_raw_backup_if_available(profile_id)
        except Exception as exc:
            state.log_exception("grid_backup_restore_raw", exc)
            return internal_error_response()
        state.log_action("restore-raw", command=f"profile_id={profile_id} restored={restored}")
        return ok_response(restored=restored)
