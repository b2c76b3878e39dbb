from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "galactic-strike"
RUNTIME_DIR_ENV = "GALACTIC_RUNTIME_DIR"
DEFAULT_ASSETS_DIR = Path("assets")


def default_runtime_dir() -> Path:
    """Per-user directory for galactic.cfg, console.log, traces and crash.log."""
    override = os.environ.get(RUNTIME_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return PlatformDirs(APP_NAME, appauthor=False).user_data_path
