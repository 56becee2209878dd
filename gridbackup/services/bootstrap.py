"""Service startup: ordered boot steps, then the Flask server."""

from gridbackup.services.grid_backup_runtime import backup_or_restore


def restore_step(state):
    """Boot step: back up or restore the favorites table once at startup."""

    def run():
        restored = backup_or_restore(state)
        state.log_action("boot-restore", command=f"restored={restored}")
        return restored

    return run


def _failure_note(exc, fallback):
    return str(exc)[:500] or fallback


def run_boot_steps(boot_steps, log_action, log_exception):
    """Run ``(name, callable)`` steps in order; the first failure is logged and re-raised."""
    completed = []
    for step_name, step_func in boot_steps:
        try:
            step_func()
        except Exception as exc:
            log_exception(f"boot_step/{step_name}", exc)
            log_action("boot-failed", command=step_name, rejection_message=_failure_note(exc, "startup step failed"))
            raise
        completed.append(step_name)
    return completed


def run_server(app, settings, log_action, log_exception, boot_steps):
    """Run the boot steps, then serve on the configured host/port until stopped."""
    address = f"host={settings.web_host} port={settings.web_port}"
    log_action("boot-start", command=address)
    completed = run_boot_steps(boot_steps, log_action, log_exception)
    log_action("boot-ready", command=f"{address} steps={','.join(completed) or '-'}")
    try:
        app.run(host=settings.web_host, port=settings.web_port)
    except Exception as exc:
        log_exception("serve", exc)
        log_action("boot-failed", command="serve", rejection_message=_failure_note(exc, "web server startup failed"))
        raise
