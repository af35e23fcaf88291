# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Everything local lives under a gitignored data dir.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    # ---- Behaviour switches ----
    seed_data: bool
    serialize_writes: bool

    # Empty means "any domain"; e.g. "gmail.com" restricts task assignees to that domain.
    assignee_domain: str

    password_iterations: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "records.sqlite3")

        seed_data = _env_bool(_k("SEED_DATA"), True)
        serialize_writes = _env_bool(_k("SERIALIZE_WRITES"), True)

        assignee_domain = _env(_k("ASSIGNEE_DOMAIN"), "").strip().lower().lstrip("@")
        password_iterations = max(1, _env_int(_k("PASSWORD_ITERATIONS"), 200_000))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            seed_data=seed_data,
            serialize_writes=serialize_writes,
            assignee_domain=assignee_domain,
            password_iterations=password_iterations,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
