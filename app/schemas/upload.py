"""
app/schemas/upload.py

Response schemas for the upload endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UploadMessageResponse(BaseModel):
    """
    Plain message body used for errors and the greeting route.
    """

    message: str


class UploadSummaryResponse(BaseModel):
    """
    API response model for a completed ingestion run.
    """

    message: str
    rows_processed: int = Field(..., ge=0)
    rows_failed: int = Field(..., ge=0)
    rows_inserted: int = Field(..., ge=0)
    batches_written: int = Field(..., ge=0)
    batches_failed: int = Field(..., ge=0)
