"""Typed runtime state shared by the grid backup routes and boot steps."""
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class GridBackupState:
    """Everything one app process needs to serve backup/restore requests.

    ``lock`` serializes every operation on ``grid_backup``; the backup table
    itself defines no locking.
    """
    grid_backup: Any
    profiles: Any
    db_helper: Any
    lock: Any
    log_action: Callable[..., None]
    log_exception: Callable[[str, BaseException], None]
