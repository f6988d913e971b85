"""Tests for config.py: get_config_path() and load_config()."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from bearmark.config import (
    DEFAULT_AUTOSAVE_DELAY,
    Config,
    ConfigError,
    get_config_path,
    load_config,
)

# === get_config_path() ===


def test_get_config_path_respects_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """XDG_CONFIG_HOME overrides the default config location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_config_path() == tmp_path / "bearmark" / "config.toml"


def test_get_config_path_falls_back_to_home(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without XDG_CONFIG_HOME, defaults to ~/.config/bearmark/config.toml."""
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    assert get_config_path() == Path.home() / ".config" / "bearmark" / "config.toml"


# === load_config() ===


def test_load_config_valid_toml(tmp_path: Path) -> None:
    """Every section is read into Config."""
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        textwrap.dedent("""\
        [editor]
        autosave_delay = 2

        [storage]
        db_path = "~/notes/bearmark.db"

        [keys]
        "ctrl+g" = "code"
        "ctrl+i" = ""
        """)
    )
    config = load_config(config_file)
    assert config == Config(
        autosave_delay=2.0,
        db_path=Path.home() / "notes" / "bearmark.db",
        keys={"ctrl+g": "code", "ctrl+i": ""},
    )


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    """Missing config file returns the defaults without raising."""
    config = load_config(tmp_path / "nonexistent.toml")
    assert config == Config()
    assert config.autosave_delay == DEFAULT_AUTOSAVE_DELAY


def test_load_config_empty_file_returns_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("")
    assert load_config(config_file) == Config()


def test_load_config_invalid_toml_raises(tmp_path: Path) -> None:
    """Malformed TOML raises ConfigError."""
    config_file = tmp_path / "config.toml"
    config_file.write_text("[editor\nautosave_delay = ")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(config_file)


@pytest.mark.parametrize("value", ["0", "-1", "true", '"fast"'])
def test_load_config_rejects_bad_delay(tmp_path: Path, value: str) -> None:
    """autosave_delay must be a positive number."""
    config_file = tmp_path / "config.toml"
    config_file.write_text(f"[editor]\nautosave_delay = {value}\n")
    with pytest.raises(ConfigError, match="autosave_delay"):
        load_config(config_file)


def test_load_config_rejects_empty_db_path(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[storage]\ndb_path = ""\n')
    with pytest.raises(ConfigError, match="db_path"):
        load_config(config_file)


def test_load_config_rejects_non_string_key_binding(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[keys]\n"ctrl+g" = 3\n')
    with pytest.raises(ConfigError, match="must be a command name"):
        load_config(config_file)


def test_load_config_rejects_non_table_section(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('keys = "ctrl+b"\n')
    with pytest.raises(ConfigError, match=r"\[keys\].*must be a table"):
        load_config(config_file)
