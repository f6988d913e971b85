"""User configuration: load and validate config.toml."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_AUTOSAVE_DELAY = 0.5


class ConfigError(Exception):
    """Raised when config.toml is malformed or holds invalid values."""


@dataclass
class Config:
    """Settings read from config.toml."""

    autosave_delay: float = DEFAULT_AUTOSAVE_DELAY  # seconds
    db_path: Path | None = None  # None means the XDG default
    keys: dict[str, str] = field(default_factory=dict)  # key name -> command name


def get_config_path() -> Path:
    """Return the path to config.toml, respecting XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "bearmark" / "config.toml"


def _table(data: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        msg = f"[{name}] in {path} must be a table"
        raise ConfigError(msg)
    return value


def load_config(path: Path) -> Config:
    """Load and validate settings from a TOML file.

    Returns the defaults if the file does not exist.
    Raises ConfigError on parse errors or invalid values.
    """
    if not path.exists():
        return Config()

    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e

    config = Config()

    editor = _table(data, "editor", path)
    if "autosave_delay" in editor:
        delay = editor["autosave_delay"]
        if isinstance(delay, bool) or not isinstance(delay, int | float) or delay <= 0:
            msg = f"editor.autosave_delay in {path} must be a positive number of seconds"
            raise ConfigError(msg)
        config.autosave_delay = float(delay)

    storage = _table(data, "storage", path)
    if "db_path" in storage:
        db_path = storage["db_path"]
        if not isinstance(db_path, str) or not db_path:
            msg = f"storage.db_path in {path} must be a non-empty string"
            raise ConfigError(msg)
        config.db_path = Path(db_path).expanduser()

    for key, name in _table(data, "keys", path).items():
        if not isinstance(name, str):
            msg = f"keys.{key} in {path} must be a command name"
            raise ConfigError(msg)
        config.keys[key] = name

    return config
