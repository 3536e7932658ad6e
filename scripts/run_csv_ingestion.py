"""
Run one CSV user ingestion from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os

from app.config import get_csv_ingestion_settings, resolve_csv_path
from app.errors import CSVIngestionError
from app.services.age_distribution_service import AgeDistributionService
from app.services.csv_ingestion_service import CSVIngestionService
from db.session import SessionLocal, dispose_engine


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest a CSV file into the users table.")
    parser.add_argument(
        "--path",
        dest="path",
        default=None,
        help="CSV file to ingest. Defaults to CSV_FILE_PATH.",
    )
    parser.add_argument(
        "--batch-size",
        dest="batch_size",
        type=int,
        default=None,
        help="Rows per INSERT. Defaults to CSV_INGEST_BATCH_SIZE.",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the age distribution after ingesting.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = get_csv_ingestion_settings()
    path = resolve_csv_path(args.path) if args.path else settings.csv_file_path
    if path is None:
        parser.error("No CSV file given. Pass --path or set CSV_FILE_PATH.")

    service = CSVIngestionService(
        batch_size=args.batch_size or settings.batch_size,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )

    try:
        with SessionLocal() as db:
            try:
                summary = service.ingest_file(path=path, db=db)
            except CSVIngestionError as exc:
                print(json.dumps({"status": "failed", "error": str(exc)}, indent=2))
                return 1

            payload: dict[str, object] = {
                "status": summary.state.value,
                "batch_size": service.batch_size,
                "rows_processed": summary.rows_processed,
                "rows_failed": summary.rows_failed,
                "rows_inserted": summary.rows_inserted,
                "batches_written": summary.batches_written,
                "batch_failures": [
                    {"batch_number": failure.batch_number, "size": failure.size, "message": failure.message}
                    for failure in summary.batch_failures
                ],
            }
            if args.report:
                payload["age_distribution"] = [
                    {"age_group": share.age_group, "percentage": share.percentage}
                    for share in AgeDistributionService().compute(db)
                ]
    finally:
        dispose_engine()

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
