"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config import get_csv_ingestion_settings


def get_csv_file_path() -> Path:
    """
    Return the configured CSV input path, or fail the request when unset.
    """

    path = get_csv_ingestion_settings().csv_file_path
    if path is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="CSV_FILE_PATH is not configured.",
        )
    return path


def get_session_factory() -> Callable[[], Session]:
    """
    Session factory for work that outlives the request, such as background reports.
    """

    from db.session import SessionLocal

    return SessionLocal
