import tempfile
import unittest
from pathlib import Path

from gridbackup.core.service_config import ServiceConfig, load_settings


class ServiceConfigTests(unittest.TestCase):
    def test_reads_basic_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            conf = root / "gridbackup.env"
            conf.write_text(
                "\n".join(
                    [
                        "# launcher grid",
                        "GRID_X=4",
                        "HOTSEAT_SIZE=-3",
                        "export PROFILE_NAME='work'",
                        "RESTORE_ON_BOOT=off",
                        "LAUNCHER_DB_PATH=./data/launcher.db",
                        "BROKEN_LINE",
                    ]
                ),
                encoding="utf-8",
            )
            cfg = ServiceConfig(conf, root)
            self.assertEqual(cfg.get_int("GRID_X", 0), 4)
            self.assertEqual(cfg.get_int("HOTSEAT_SIZE", 5, minimum=0), 0)
            self.assertEqual(cfg.get_str("PROFILE_NAME", "owner"), "work")
            self.assertFalse(cfg.get_bool("RESTORE_ON_BOOT", True))
            self.assertEqual(cfg.get_path("LAUNCHER_DB_PATH", None), root / "data" / "launcher.db")
            self.assertNotIn("BROKEN_LINE", cfg.values)

    def test_load_settings_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "gridbackup.env").write_text(
                "PROFILE_SERIALS=owner:0,work:10,bad:x\nGRID_Y=6\n",
                encoding="utf-8",
            )
            settings = load_settings(ServiceConfig(root / "gridbackup.env", root))
            self.assertEqual(settings.launcher_db_path, root / "data" / "launcher.db")
            self.assertIsNone(settings.backup_db_path)
            self.assertEqual((settings.hotseat_size, settings.grid_x, settings.grid_y), (5, 5, 6))
            self.assertEqual(settings.profile_serials, {"owner": 0, "work": 10})
            self.assertEqual(settings.log_file, root / "logs" / "gridbackup.log")
            self.assertTrue(settings.restore_on_boot)

    def test_missing_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            cfg = ServiceConfig(root / "missing.env", root)
            self.assertEqual(cfg.values, {})
            self.assertEqual(load_settings(cfg).profile_serials, {"owner": 0})


if __name__ == "__main__":
    unittest.main()
