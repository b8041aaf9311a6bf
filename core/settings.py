"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``.

    ``PROCESSHUB_DATA_DIR`` in ``env`` wins over the platform default.
    """

    platform_id = (platform or sys.platform).lower()
    environ = dict(env if env is not None else os.environ)
    override = environ.get("PROCESSHUB_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "ProcessHub"


DATA_DIR = get_default_data_dir(APP_NAME)
DB_PATH = DATA_DIR / "processhub.db"
CONFIG_PATH = DATA_DIR / "config.json"
SYNC_LOG_PATH = DATA_DIR / "logs" / "sync.log"


@dataclass(frozen=True)
class AsanaSettings:
    api_base: str = "https://app.asana.com/api/1.0"
    timeout_sec: float = 30.0
    page_limit: int = 100
    task_fields: tuple[str, ...] = (
        "name",
        "notes",
        "completed",
        "completed_at",
        "assignee.name",
        "assignee.gid",
        "due_on",
        "due_at",
        "num_subtasks",
        "permalink_url",
    )
    subtask_fields: tuple[str, ...] = (
        "name",
        "notes",
        "completed",
        "completed_at",
        "assignee.name",
        "assignee.gid",
        "due_on",
    )


ASANA = AsanaSettings()


@dataclass(frozen=True)
class SyncSettings:
    assignee_workers: int = 4
    batch_delay_sec: float = 1.0
    log_max_bytes: int = 1_000_000
    log_backup_count: int = 3


SYNC = SyncSettings()


def asana_token_from_env(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    environ = env if env is not None else os.environ
    token = (environ.get("ASANA_ACCESS_TOKEN") or "").strip()
    return token or None


__all__ = [
    "APP_NAME",
    "ASANA",
    "CONFIG_PATH",
    "DATA_DIR",
    "DB_PATH",
    "SYNC",
    "SYNC_LOG_PATH",
    "asana_token_from_env",
    "get_default_data_dir",
]
