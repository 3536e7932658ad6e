"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from db.config import PROJECT_ROOT, load_env_files

# Each row binds four parameters and PostgreSQL accepts at most 65535 per statement.
MAX_BATCH_SIZE = 65535 // 4


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def resolve_csv_path(raw_path: str) -> Path:
    """
    Resolve a configured CSV path; relative paths are taken from the project root.
    """

    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path.resolve()


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for CSV ingestion.
    """

    csv_file_path: Path | None = None
    batch_size: int = 1000
    max_validation_errors: int = 500
    log_validation_errors: bool = True


@dataclass(frozen=True)
class ServerSettings:
    """
    Network settings for the HTTP server.
    """

    host: str = "0.0.0.0"
    port: int = 3000


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV ingestion settings from environment variables.
    """

    raw_path = _get_optional_str_env("CSV_FILE_PATH")
    return CSVIngestionSettings(
        csv_file_path=resolve_csv_path(raw_path) if raw_path else None,
        batch_size=min(MAX_BATCH_SIZE, max(1, _get_int_env("CSV_INGEST_BATCH_SIZE", 1000))),
        max_validation_errors=max(1, _get_int_env("CSV_INGEST_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("CSV_INGEST_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """
    Return cached HTTP server settings from environment variables.
    """

    return ServerSettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=_get_int_env("PORT", 3000),
    )
