import tempfile
import unittest
from pathlib import Path
from zoneinfo import ZoneInfo

from gridbackup.core.action_logging import (
    make_log_action,
    make_log_exception,
    rotate_log_file,
    sanitize_log_fragment,
)


class ActionLoggingTests(unittest.TestCase):
    def test_sanitize_log_fragment(self):
        self.assertEqual("a b c", sanitize_log_fragment(" a\nb\r\n  c "))
        self.assertEqual("", sanitize_log_fragment(None))

    def test_log_action_writes_one_line(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp) / "logs"
            log_file = log_dir / "gridbackup.log"
            log_action = make_log_action(ZoneInfo("UTC"), log_dir, log_file)

            log_action("grid-backup-version-mismatch", rejection_message="expecting 3\nbut 2")

            lines = log_file.read_text(encoding="utf-8").splitlines()
            self.assertEqual(1, len(lines))
            self.assertIn("<gridbackup> [gridbackup/grid-backup-version-mismatch]", lines[0])
            self.assertTrue(lines[0].endswith("rejected: expecting 3 but 2"))

    def test_log_exception_reports_context(self):
        calls = []
        log_exception = make_log_exception(lambda action, **kwargs: calls.append((action, kwargs)))
        try:
            raise ValueError("bad input")
        except ValueError as exc:
            log_exception("grid_backup_restore", exc)

        action, kwargs = calls[0]
        self.assertEqual("error", action)
        self.assertTrue(kwargs["rejection_message"].startswith("grid_backup_restore: ValueError: bad input"))
        self.assertIn("traceback:", kwargs["rejection_message"])

    def test_rotate_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "gridbackup.log"
            path.write_text("x" * 20, encoding="utf-8")
            rotate_log_file(path, max_bytes=10, backup_count=2)
            self.assertFalse(path.exists())
            self.assertTrue(path.with_name("gridbackup.log.1").exists())


if __name__ == "__main__":
    unittest.main()
