"""Logging setup helpers."""

from gridbackup.core.action_logging import make_log_action, make_log_exception


def build_loggers(settings):
    """Create the service event logger and its exception logger."""
    log_action = make_log_action(settings.display_tz, settings.log_dir, settings.log_file)
    return log_action, make_log_exception(log_action)
