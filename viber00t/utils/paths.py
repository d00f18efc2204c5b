"""Utilities for locating configuration, cache and state directories."""

import os
from pathlib import Path
from typing import Optional

from ..core.constants import APP_NAME


def _xdg_dir(variable: str, *fallback: str) -> Path:
    value = os.environ.get(variable)
    if value:
        return Path(value)
    return Path.home().joinpath(*fallback)


def config_home() -> Path:
    """Directory holding the global configuration."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_NAME


def cache_home() -> Path:
    """Directory holding generated build contexts."""
    return _xdg_dir("XDG_CACHE_HOME", ".cache") / APP_NAME


def state_home() -> Path:
    """Directory holding build-state records."""
    return _xdg_dir("XDG_STATE_HOME", ".local", "state") / APP_NAME


def expand_home(path: str, home: Optional[Path] = None) -> str:
    """Expand a leading ``~/`` against the user's home directory."""
    if path.startswith("~/"):
        home = home or Path.home()
        return str(home / path[2:])
    return path
