"""
app/services package marker.
"""

from app.services.age_distribution_service import (
    AgeDistributionService,
    run_age_distribution_report,
)
from app.services.batch_accumulator import BatchAccumulator
from app.services.csv_ingestion_service import (
    CSVIngestionService,
    get_csv_ingestion_service,
)

__all__ = [
    "AgeDistributionService",
    "BatchAccumulator",
    "CSVIngestionService",
    "get_csv_ingestion_service",
    "run_age_distribution_report",
]
