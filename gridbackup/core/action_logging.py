"""Event/error log writers for the grid backup service."""

from datetime import datetime
import os
import traceback
from flask import request, has_request_context

LOG_ROTATE_MAX_BYTES = 5 * 1024 * 1024
LOG_ROTATE_BACKUP_COUNT = 5
LOG_SOURCE = "gridbackup"


def sanitize_log_fragment(text):
    """Collapse whitespace and newlines so one event stays on one line."""
    return " ".join(str(text or "").split()).strip()


def get_log_client():
    """Return the requesting client IP, or the service name outside requests."""
    if not has_request_context():
        return LOG_SOURCE
    forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return (request.remote_addr or "").strip() or LOG_SOURCE


def rotate_log_file(path, max_bytes=LOG_ROTATE_MAX_BYTES, backup_count=LOG_ROTATE_BACKUP_COUNT):
    """Shift ``path`` to ``path.1`` (and older files up) once it reaches ``max_bytes``."""
    if max_bytes <= 0 or backup_count <= 0:
        return
    try:
        if not path.exists() or path.stat().st_size < max_bytes:
            return
        for idx in range(backup_count - 1, 0, -1):
            older = path.with_name(f"{path.name}.{idx}")
            if older.exists():
                os.replace(older, path.with_name(f"{path.name}.{idx + 1}"))
        os.replace(path, path.with_name(f"{path.name}.1"))
    except OSError:
        # Rotation failures must not break backup/restore callers.
        pass


def format_log_line(display_tz, action, command=None, rejection_message=None):
    """Render one event line, or '' when nothing printable remains."""
    stamp = datetime.now(tz=display_tz).strftime("%b %d %H:%M:%S")
    client = sanitize_log_fragment(get_log_client()) or "unknown"
    name = sanitize_log_fragment(action) or "unknown"
    parts = [f"{stamp} <{client}> [{LOG_SOURCE}/{name}]"]
    detail = sanitize_log_fragment(command)
    if detail:
        parts.append(detail)
    rejected = sanitize_log_fragment(rejection_message)
    if rejected:
        parts.append(f"rejected: {rejected}")
    return " ".join(parts)


def make_log_action(display_tz, log_dir, log_file):
    """Return ``log_action(action, command=None, rejection_message=None)`` bound to ``log_file``."""

    def log_action(action, command=None, rejection_message=None):
        line = format_log_line(display_tz, action, command, rejection_message)
        if not line:
            return
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            rotate_log_file(log_file)
            with log_file.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            # Logging must not break backup/restore callers.
            pass

    return log_action


def make_log_exception(log_action, traceback_limit=700):
    """Return ``log_exception(context, exc)`` that reports through ``log_action``."""

    def log_exception(context, exc):
        name = type(exc).__name__ if exc is not None else "Exception"
        message = f"{context}: {name}"
        text = sanitize_log_fragment(exc)
        if text:
            message += f": {text}"
        if exc is not None and exc.__traceback__ is not None:
            tb = sanitize_log_fragment(" | ".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
            message += f" | traceback: {tb[:traceback_limit]}"
        log_action("error", rejection_message=message)

    return log_exception
