"""Configuration loading for optikit.

Settings come from an `.optikitrc` / `.optikitrc.json` JSON file in the
project directory or the home directory, merged over `OptikitConfig`
defaults. The file uses camelCase keys; snake_case keys are accepted too.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import BACKUP_RETENTION_COUNT, CONFIG_FILE_NAMES, CONFIG_SAVE_NAME

logger = logging.getLogger(__name__)

# camelCase file keys -> dataclass field names
_FILE_KEYS = {
    "backupRetentionCount": "backup_retention_count",
    "useFvmByDefault": "use_fvm_by_default",
    "autoBackup": "auto_backup",
    "verbose": "verbose",
}

_FIELD_TYPES = {
    "backup_retention_count": int,
    "use_fvm_by_default": bool,
    "auto_backup": bool,
    "verbose": bool,
}


@dataclass(frozen=True)
class OptikitConfig:
    """User configuration, read once at startup."""

    backup_retention_count: int = BACKUP_RETENTION_COUNT
    use_fvm_by_default: bool = True
    auto_backup: bool = True
    verbose: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptikitConfig":
        """Build a config from file data, ignoring unknown keys.

        Raises:
            TypeError: If a known key holds a value of the wrong JSON type.
            ValueError: If `backupRetentionCount` is negative.
        """
        known = {f.name: _FIELD_TYPES[f.name] for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _FILE_KEYS.get(key, key)
            if name not in known:
                continue
            expected = known[name]
            # bool is an int subclass, so it needs an exact check
            if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
                raise TypeError(f"{key} must be {expected.__name__}, got {type(value).__name__}")
            values[name] = value
        if values.get("backup_retention_count", 0) < 0:
            raise ValueError("backupRetentionCount must not be negative")
        return replace(cls(), **values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the config file."""
        by_field = {v: k for k, v in _FILE_KEYS.items()}
        return {by_field[name]: value for name, value in asdict(self).items()}


def get_config_path(cwd: Optional[Path] = None, home: Optional[Path] = None) -> Optional[Path]:
    """Find the config file, checking the project directory before home."""
    cwd = cwd or Path.cwd()
    home = home or Path.home()

    for directory in (cwd, home):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.exists():
                return candidate
    return None


def load_config(cwd: Optional[Path] = None, home: Optional[Path] = None) -> OptikitConfig:
    """Load configuration, falling back to defaults when absent or unreadable."""
    config_path = get_config_path(cwd, home)
    if config_path is None:
        return OptikitConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("config root must be a JSON object")
        config = OptikitConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}, using defaults: {e}")
        return OptikitConfig()

    logger.debug(f"Loaded config from {config_path}")
    return config


def save_config(config: OptikitConfig, directory: Optional[Path] = None) -> Path:
    """Write the config to `.optikitrc.json` in `directory`. Raises OSError on failure."""
    config_path = (directory or Path.cwd()) / CONFIG_SAVE_NAME
    config_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    return config_path
