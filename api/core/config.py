"""
Process-wide settings.

Everything here is read from the environment exactly once (see `Settings.from_env`)
and then passed around explicitly. Handlers reach it through `request.app.state.settings`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_UPLOAD_DIR = "/TESTE"
DEFAULT_PORT = 3000
DEFAULT_MAX_FILE_BYTES = 200 * 1024 * 1024  # 200 MiB
DEFAULT_MAX_FILES = 50
DEFAULT_MAX_JSON_BYTES = 100 * 1024  # 100 KiB


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    upload_dir: Path = Path(DEFAULT_UPLOAD_DIR)
    api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    database_url: str = ""
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    max_files: int = DEFAULT_MAX_FILES
    max_json_bytes: int = DEFAULT_MAX_JSON_BYTES
    # Empty means "any valid identifier".
    allowed_tables: frozenset[str] = field(default_factory=frozenset)
    insert_id_column: str = "id"
    cors_origins: tuple[str, ...] = ()
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            upload_dir=Path(_env_str("UPLOAD_DIR", DEFAULT_UPLOAD_DIR)),
            api_key=os.environ.get("API_KEY") or None,
            host=_env_str("HOST", "0.0.0.0"),
            port=_env_int("PORT", DEFAULT_PORT),
            database_url=_env_str("DATABASE_URL"),
            max_file_bytes=_env_int("MAX_FILE_BYTES", DEFAULT_MAX_FILE_BYTES),
            max_files=_env_int("MAX_FILES", DEFAULT_MAX_FILES),
            max_json_bytes=_env_int("MAX_JSON_BYTES", DEFAULT_MAX_JSON_BYTES),
            allowed_tables=frozenset(_env_list("ALLOWED_TABLES")),
            insert_id_column=_env_str("INSERT_ID_COLUMN", "id"),
            cors_origins=_env_list("CORS_ORIGINS"),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )
