"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of SenseiConfig to/from TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from sensei.domain.config import SenseiConfig


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/sensei/config.toml or ~/.config/sensei/config.toml
    - Windows: %APPDATA%/sensei/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "sensei" / "config.toml"
        return Path.home() / ".config" / "sensei" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "sensei" / "config.toml"
        return Path.home() / ".config" / "sensei" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def load_config(path: Path) -> SenseiConfig:
    """Load configuration from a TOML file on top of the defaults.

    Args:
        path: Path to config.toml file

    Returns:
        Parsed SenseiConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    data = load_config_data(path)
    return SenseiConfig.from_partial(SenseiConfig.default(), data)


def config_to_data(config: SenseiConfig) -> dict[str, Any]:
    """Convert a SenseiConfig into plain TOML-serializable data."""
    return {
        "author": {
            "name": config.author.name,
            "email": config.author.email,
        },
        "diff": {
            "context_lines": config.diff.context_lines,
        },
    }


def save_config(config: SenseiConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: SenseiConfig to save
        path: Destination path for config.toml
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
