"""App factory and runtime wiring entrypoint."""

import threading
from pathlib import Path

from flask import Flask

from gridbackup.core.grid_backup_table import GridBackupTable
from gridbackup.core.launcher_db import LauncherDbHelper
from gridbackup.core.logging_setup import build_loggers
from gridbackup.core.profiles import ProfileRegistry
from gridbackup.core.service_config import ServiceConfig, load_settings
from gridbackup.routes.grid_backup_routes import register_grid_backup_routes
from gridbackup.state import GridBackupState

APP_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = APP_DIR / "gridbackup.env"


def build_state(settings):
    """Open the databases and wire the backup table with its collaborators."""
    log_action, log_exception = build_loggers(settings)
    profiles = ProfileRegistry(settings.profile_serials, settings.profile_name)
    db_helper = LauncherDbHelper(
        settings.launcher_db_path,
        settings.schema_version,
        profiles.my_serial(),
        backup_db_path=settings.backup_db_path,
        log_exception=log_exception,
    )
    favorites_db, backup_db = db_helper.open()
    grid_backup = GridBackupTable(
        favorites_db,
        backup_db,
        settings.hotseat_size,
        settings.grid_x,
        settings.grid_y,
        owner_serial_resolver=profiles.my_serial,
        was_empty_db_created=db_helper.was_empty_db_created,
        log_action=log_action,
    )
    return GridBackupState(
        grid_backup=grid_backup,
        profiles=profiles,
        db_helper=db_helper,
        lock=threading.Lock(),
        log_action=log_action,
        log_exception=log_exception,
    )


def create_app(settings=None):
    """Return the Flask app; its runtime state is under ``app.extensions['gridbackup']``."""
    if settings is None:
        settings = load_settings(ServiceConfig(CONFIG_PATH, APP_DIR))
    app = Flask(__name__)
    app.config["GRIDBACKUP_SETTINGS"] = settings
    state = build_state(settings)
    app.extensions["gridbackup"] = state
    register_grid_backup_routes(app, state)
    return app
