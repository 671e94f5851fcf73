"""
FILE: tasktrack/config.py
PURPOSE: Application settings loaded from environment variables
EXPORTS:
  - ENV_PREFIX
  - DEFAULT_DATA_DIR
  - Settings (frozen dataclass)
DEPENDENCIES:
  - os, pathlib, dataclasses (stdlib)
NOTES:
  - One Settings object per process, built by the entry point
  - Nothing here is required at import time
  - Datastore URLs are resolved separately in tasktrack.core.datastore
  - Unparseable values fall back to defaults instead of failing
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TASKTRACK"

# Local data location (cross-platform)
DEFAULT_DATA_DIR = Path.home() / ".tasktrack"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str
    log_file: Path
    sql_echo: bool

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("HOME"), DEFAULT_DATA_DIR)
        log_level = (_first_env(_k("LOG_LEVEL"), default="WARNING") or "WARNING").strip().upper()
        log_file = _env_path(_k("LOG_FILE"), data_dir / "tasktrack.log")
        sql_echo = _env_bool(_k("SQL_ECHO"), False)

        return Settings(
            data_dir=data_dir,
            log_level=log_level,
            log_file=log_file,
            sql_echo=sql_echo,
        )
