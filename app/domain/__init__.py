"""
app/domain package marker.
"""

from app.domain.user_record import (
    AgeBucketShare,
    BatchFailure,
    IngestionRun,
    IngestionState,
    IngestionStateError,
    IngestionSummary,
    RowValidationError,
    UserRecordInput,
)

__all__ = [
    "AgeBucketShare",
    "BatchFailure",
    "IngestionRun",
    "IngestionState",
    "IngestionStateError",
    "IngestionSummary",
    "RowValidationError",
    "UserRecordInput",
]
