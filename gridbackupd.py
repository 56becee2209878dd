"""Grid backup service entrypoint.

Backs up or restores the launcher favorites table at startup, then serves the
backup control routes.
"""

from gridbackup.application_factory import create_app
from gridbackup.services.bootstrap import restore_step, run_server


def main():
    app = create_app()
    settings = app.config["GRIDBACKUP_SETTINGS"]
    state = app.extensions["gridbackup"]
    boot_steps = []
    if settings.restore_on_boot:
        boot_steps.append(("backup_or_restore", restore_step(state)))
    try:
        run_server(app, settings, state.log_action, state.log_exception, boot_steps)
    finally:
        state.db_helper.close()


if __name__ == "__main__":
    main()
