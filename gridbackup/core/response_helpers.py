"""Shared Flask JSON response helpers."""

from flask import jsonify


def ok_response(**payload):
    """Return a success payload, merged with any extra fields."""
    body = {"ok": True}
    body.update(payload)
    return jsonify(body)


def invalid_request_response(message):
    """Return a 400 payload for malformed request parameters."""
    return jsonify({"ok": False, "error": "invalid_request", "message": message}), 400


def internal_error_response():
    """Return generic internal-error payload."""
    return jsonify({"ok": False, "error": "internal_error", "message": "Internal server error."}), 500
