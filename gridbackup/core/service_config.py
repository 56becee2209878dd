"""KEY=VALUE service config file and the settings derived from it."""

from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo

from gridbackup.core.profiles import parse_profile_serials


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ServiceConfig:
    """Typed accessors over a dotenv-style ``gridbackup.env`` file."""

    def __init__(self, config_path, base_dir):
        self.config_path = Path(config_path)
        self.base_dir = Path(base_dir)
        self.values = self._read_values()

    def _read_values(self):
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except OSError:
            return {}
        values = {}
        for raw in text.splitlines():
            line = raw.strip()
            if line.startswith("export "):
                line = line[len("export "):].strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            key = key.strip()
            if not sep or not key:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] in {"'", '"'} and value[-1] == value[0]:
                value = value[1:-1]
            values[key] = value
        return values

    def _raw(self, name):
        raw = self.values.get(name)
        if raw is None:
            return None
        raw = str(raw).strip()
        return raw or None

    def get_str(self, name, default):
        raw = self._raw(name)
        return default if raw is None else raw

    def get_int(self, name, default, minimum=None):
        """Parse an integer, clamping to ``minimum`` and falling back on junk."""
        raw = self._raw(name)
        if raw is None:
            return default
        try:
            parsed = int(raw)
        except ValueError:
            return default
        if minimum is not None:
            parsed = max(parsed, minimum)
        return parsed

    def get_bool(self, name, default):
        raw = self._raw(name)
        if raw is None:
            return default
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        return default

    def get_path(self, name, default):
        """Resolve a path setting; relative values are taken from ``base_dir``."""
        raw = self._raw(name)
        if raw is None:
            return Path(default) if default is not None else None
        candidate = Path(raw)
        return candidate if candidate.is_absolute() else self.base_dir / candidate


@dataclass
class Settings:
    """Resolved runtime settings for the grid backup service."""
    launcher_db_path: Path
    backup_db_path: Path | None
    schema_version: int
    hotseat_size: int
    grid_x: int
    grid_y: int
    profile_name: str
    log_dir: Path
    log_file: Path
    display_tz: ZoneInfo
    web_host: str
    web_port: int
    restore_on_boot: bool = True
    profile_serials: dict = field(default_factory=dict)


def load_settings(cfg):
    """Build ``Settings`` from a ``ServiceConfig`` with service defaults."""
    base = cfg.base_dir
    log_dir = cfg.get_path("LOG_DIR", base / "logs")
    profile_name = cfg.get_str("PROFILE_NAME", "owner")
    serials = parse_profile_serials(cfg.get_str("PROFILE_SERIALS", ""))
    serials.setdefault(profile_name, 0)
    return Settings(
        launcher_db_path=cfg.get_path("LAUNCHER_DB_PATH", base / "data" / "launcher.db"),
        backup_db_path=cfg.get_path("BACKUP_DB_PATH", None),
        schema_version=cfg.get_int("SCHEMA_VERSION", 1, minimum=1),
        hotseat_size=cfg.get_int("HOTSEAT_SIZE", 5, minimum=0),
        grid_x=cfg.get_int("GRID_X", 5, minimum=1),
        grid_y=cfg.get_int("GRID_Y", 5, minimum=1),
        profile_name=profile_name,
        log_dir=log_dir,
        log_file=log_dir / cfg.get_str("LOG_FILE_NAME", "gridbackup.log"),
        display_tz=ZoneInfo(cfg.get_str("DISPLAY_TZ", "UTC")),
        web_host=cfg.get_str("WEB_HOST", "127.0.0.1"),
        web_port=cfg.get_int("WEB_PORT", 8080, minimum=1),
        restore_on_boot=cfg.get_bool("RESTORE_ON_BOOT", True),
        profile_serials=serials,
    )
