"""
app/services/csv_ingestion_service.py

Service layer for streaming CSV user ingestion.

One run reads the file strictly in order: the first line is the header, every
other line becomes one user record, and records are inserted in fixed-size
batches. A failed batch is logged and recorded in the summary, and the run
carries on with the next batch. Fatal errors (missing file, unreadable
stream, missing header) move the run to FAILED and propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import IO, Protocol, Sequence

from sqlalchemy.orm import Session

from app.config import MAX_BATCH_SIZE, get_csv_ingestion_settings
from app.domain.user_record import (
    BatchFailure,
    IngestionRun,
    IngestionState,
    IngestionSummary,
    RowValidationError,
    UserRecordInput,
)
from app.errors import (
    BatchWriteError,
    CSVFileNotFoundError,
    CSVHeaderValidationError,
    CSVReadError,
    MalformedRecordError,
)
from app.mappers.nested_field_assigner import build_raw_record
from app.mappers.user_record_mapper import UserRecordMapper
from app.parsing.csv_lines import iter_lines, parse_header, split_values
from app.repositories.user_repository import UserRepository
from app.services.batch_accumulator import BatchAccumulator

logger = logging.getLogger(__name__)


class BatchWriter(Protocol):
    def insert_batch(self, rows: Sequence[UserRecordInput], *, batch_number: int = 1) -> int:
        ...


class CSVIngestionService:
    """
    Coordinates line reading, nested mapping, batching, and persistence.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        max_validation_errors: int = 500,
        log_validation_errors: bool = True,
        mapper: UserRecordMapper | None = None,
        repository_factory: Callable[[Session], BatchWriter] = UserRepository,
    ) -> None:
        self._batch_size = min(MAX_BATCH_SIZE, max(1, batch_size))
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._mapper = mapper or UserRecordMapper()
        self._repository_factory = repository_factory

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def ingest_file(
        self,
        *,
        path: Path | str,
        db: Session,
        run: IngestionRun | None = None,
    ) -> IngestionSummary:
        """
        Ingest the CSV file at ``path``.

        Raises ``CSVFileNotFoundError`` before touching the database when the
        file is missing. The caller owns the session lifecycle.
        """

        run = run or IngestionRun()
        csv_path = Path(path)
        if not csv_path.is_file():
            logger.error("File does not exist at path: %s", csv_path)
            run.transition(IngestionState.FAILED)
            raise CSVFileNotFoundError(csv_path)

        logger.info("Starting CSV ingestion path=%s batch_size=%d", csv_path, self._batch_size)
        try:
            raw_file = csv_path.open("rb")
        except FileNotFoundError as exc:
            run.transition(IngestionState.FAILED)
            raise CSVFileNotFoundError(csv_path) from exc
        except OSError as exc:
            run.transition(IngestionState.FAILED)
            raise CSVReadError(f"Failed to open CSV file {csv_path}: {exc}") from exc

        with raw_file:
            return self.ingest_stream(stream=raw_file, db=db, run=run)

    def ingest_stream(
        self,
        *,
        stream: IO[bytes] | IO[str],
        db: Session,
        run: IngestionRun | None = None,
    ) -> IngestionSummary:
        """
        Stream lines from ``stream`` into the users table in batches.
        """

        run = run or IngestionRun()
        repository = self._repository_factory(db)
        accumulator: BatchAccumulator[UserRecordInput] = BatchAccumulator(self._batch_size)

        rows_processed = 0
        rows_failed = 0
        rows_inserted = 0
        batches_written = 0
        batch_number = 0
        batch_failures: list[BatchFailure] = []
        captured_errors: list[RowValidationError] = []

        def flush() -> None:
            nonlocal rows_inserted, batches_written, batch_number
            batch = accumulator.drain()
            if not batch:
                return
            batch_number += 1
            try:
                rows_inserted += repository.insert_batch(batch, batch_number=batch_number)
                batches_written += 1
            except BatchWriteError as exc:
                logger.error("Error inserting batch %d: %s", exc.batch_number, exc)
                batch_failures.append(
                    BatchFailure(
                        batch_number=exc.batch_number,
                        size=exc.size,
                        message=str(exc),
                    )
                )

        run.transition(IngestionState.HEADER_PENDING)
        try:
            lines = iter_lines(stream)
            header_line = next(lines, None)
            if header_line is None:
                raise CSVHeaderValidationError("CSV header row is missing.")
            headers = parse_header(header_line)
            run.transition(IngestionState.STREAMING)

            for row_number, line in enumerate(lines, start=2):
                try:
                    values = split_values(line, len(headers))
                    raw_record = build_raw_record(headers, values)
                except MalformedRecordError as exc:
                    rows_failed += 1
                    self._record_error(
                        captured_errors,
                        RowValidationError(
                            row_number=row_number,
                            message=str(exc),
                            column=exc.path,
                            value=exc.value,
                        ),
                    )
                    continue

                rows_processed += 1
                if accumulator.add(self._mapper.map_record(raw_record)):
                    flush()

            run.transition(IngestionState.FLUSHING)
            flush()
            run.transition(IngestionState.DONE)
        except Exception:
            if not run.is_terminal:
                run.transition(IngestionState.FAILED)
            logger.exception(
                "CSV ingestion aborted after %d rows (%d inserted)",
                rows_processed,
                rows_inserted,
            )
            raise

        summary = IngestionSummary(
            rows_processed=rows_processed,
            rows_failed=rows_failed,
            rows_inserted=rows_inserted,
            batches_written=batches_written,
            batch_failures=batch_failures,
            validation_errors=captured_errors,
            state=run.state,
        )
        logger.info(
            "CSV ingestion finished rows_processed=%d rows_failed=%d rows_inserted=%d "
            "batches_written=%d batches_failed=%d",
            summary.rows_processed,
            summary.rows_failed,
            summary.rows_inserted,
            summary.batches_written,
            summary.batches_failed,
        )
        return summary

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "CSV row skipped row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


@lru_cache(maxsize=1)
def get_csv_ingestion_service() -> CSVIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_csv_ingestion_settings()
    return CSVIngestionService(
        batch_size=settings.batch_size,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
