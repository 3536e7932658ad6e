"""
Exceptions raised by the CSV user ingestion pipeline.
"""

from __future__ import annotations


class CSVIngestionError(Exception):
    """Base exception for CSV ingestion failures."""


class CSVFileNotFoundError(CSVIngestionError):
    """Raised when the configured input file does not exist at run start."""

    def __init__(self, path: object) -> None:
        super().__init__(f"CSV file does not exist at path: {path}")
        self.path = path


class CSVReadError(CSVIngestionError):
    """Raised when reading or decoding the input stream fails mid-run."""


class CSVHeaderValidationError(CSVIngestionError, ValueError):
    """Raised when the header line is missing or unusable."""


class MalformedRecordError(CSVIngestionError, ValueError):
    """Raised when a line cannot be assembled into a consistent nested record."""

    def __init__(self, message: str, *, path: str | None = None, value: str | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.value = value


class BatchWriteError(CSVIngestionError):
    """Raised when one batch insert fails and is rolled back."""

    def __init__(self, *, batch_number: int, size: int, reason: str) -> None:
        super().__init__(f"Batch {batch_number} ({size} records) was not persisted: {reason}")
        self.batch_number = batch_number
        self.size = size
        self.reason = reason
