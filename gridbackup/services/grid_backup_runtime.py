"""Startup backup/restore decision shared by the boot step and the restore route."""


def backup_or_restore(state):
    """Run ``backup_or_restore_as_needed`` under the state lock.

    The empty-database flag only describes the launch that created the table, so it
    is cleared once a decision has been made; later calls see a normal database.
    """
    with state.lock:
        restored = state.grid_backup.backup_or_restore_as_needed()
        state.db_helper.clear_empty_db_created_flag()
    return restored
