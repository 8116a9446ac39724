"""
Environment-backed settings.

Values are read on every call so tests (and `.env` loading at startup) can
change them without reloading modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PORT = 8080
DEFAULT_STATIC_DIR = "static"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


@dataclass(frozen=True)
class DbCredentials:
    user: str
    password: str
    host: str
    name: str


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def db_credentials() -> DbCredentials:
    return DbCredentials(
        user=os.environ.get("DB_USER", ""),
        password=os.environ.get("DB_PASS", ""),
        host=os.environ.get("DB_HOST", "").strip() or "localhost",
        name=os.environ.get("DB_NAME", ""),
    )


def image_base_path() -> str:
    return os.environ.get("IMAGE_PATH", "")


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def static_dir() -> Path:
    return Path(os.environ.get("STATIC_DIR", "").strip() or DEFAULT_STATIC_DIR)


def upload_dir() -> Path:
    raw = os.environ.get("UPLOAD_DIR", "").strip()
    if raw:
        return Path(raw)
    return static_dir() / "images"


def max_upload_bytes() -> int:
    return _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
