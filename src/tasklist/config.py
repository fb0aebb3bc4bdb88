"""Configuration defaults, env vars, and runtime options for tasklist."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click


VERSION = "1.0.0"

APP_NAME = "tasklist"
DEFAULT_STORAGE_KEY = "tasks"


def default_home() -> Path:
    """Directory holding the durable slots: ``$TASKLIST_HOME`` or the per-user app dir."""
    env = os.environ.get("TASKLIST_HOME")
    if env:
        return Path(env).expanduser()
    return Path(click.get_app_dir(APP_NAME))


@dataclass
class Config:
    """Runtime configuration for a tasklist session."""

    # Storage
    home: Path | str = ""
    storage_key: str = ""

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.home:
            self.home = default_home()
        self.home = Path(self.home)
        if not self.storage_key:
            self.storage_key = (
                os.environ.get("TASKLIST_STORAGE_KEY")
                or DEFAULT_STORAGE_KEY
            )
