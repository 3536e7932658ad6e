"""
app/api/routers/upload.py

CSV upload trigger endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_file_path, get_session_factory
from app.errors import CSVFileNotFoundError
from app.schemas.upload import UploadMessageResponse, UploadSummaryResponse
from app.services.age_distribution_service import run_age_distribution_report
from app.services.csv_ingestion_service import CSVIngestionService, get_csv_ingestion_service
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingestion"])


@router.get("/", response_model=UploadMessageResponse)
def root() -> UploadMessageResponse:
    return UploadMessageResponse(message="Hello! The CSV ingestion server is running.")


@router.post(
    "/upload",
    response_model=UploadSummaryResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": UploadMessageResponse}},
)
def upload(
    background_tasks: BackgroundTasks,
    csv_file_path: Path = Depends(get_csv_file_path),
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    ingestion_service: CSVIngestionService = Depends(get_csv_ingestion_service),
) -> UploadSummaryResponse | JSONResponse:
    """
    Ingest the configured CSV file, then schedule the age distribution report.
    """

    logger.info("Upload request received. Starting CSV processing...")
    try:
        summary = ingestion_service.ingest_file(path=csv_file_path, db=db)
    except CSVFileNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Error: File not found."},
        )
    except Exception as exc:  # noqa: BLE001
        logger.error("An error occurred during the upload process: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An error occurred during the upload."},
        )

    background_tasks.add_task(run_age_distribution_report, session_factory)

    return UploadSummaryResponse(
        message="File processing complete. Data inserted.",
        rows_processed=summary.rows_processed,
        rows_failed=summary.rows_failed,
        rows_inserted=summary.rows_inserted,
        batches_written=summary.batches_written,
        batches_failed=summary.batches_failed,
    )
