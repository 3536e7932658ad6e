"""
app/domain/user_record.py

Domain models used by the CSV user ingestion flow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecordInput:
    """
    Fixed-shape user row prepared for persistence.

    ``name`` and ``age`` are never None; ``address`` and ``additional_info``
    are None when the source line carried nothing for them.
    """

    name: str
    age: int
    address: Any | None = None
    additional_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class RowValidationError:
    """
    One CSV line that could not be turned into a user record.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class BatchFailure:
    """
    One batch whose insert was rolled back.
    """

    batch_number: int
    size: int
    message: str


class IngestionState(str, Enum):
    IDLE = "idle"
    HEADER_PENDING = "header_pending"
    STREAMING = "streaming"
    FLUSHING = "flushing"
    DONE = "done"
    FAILED = "failed"


_ALLOWED_TRANSITIONS: dict[IngestionState, frozenset[IngestionState]] = {
    IngestionState.IDLE: frozenset({IngestionState.HEADER_PENDING, IngestionState.FAILED}),
    IngestionState.HEADER_PENDING: frozenset({IngestionState.STREAMING, IngestionState.FAILED}),
    IngestionState.STREAMING: frozenset({IngestionState.FLUSHING, IngestionState.FAILED}),
    IngestionState.FLUSHING: frozenset({IngestionState.DONE, IngestionState.FAILED}),
    IngestionState.DONE: frozenset(),
    IngestionState.FAILED: frozenset(),
}


class IngestionStateError(RuntimeError):
    """
    Raised on a transition the ingestion state machine does not allow.
    """


@dataclass
class IngestionRun:
    """
    Mutable lifecycle tracker for one ingestion run.
    """

    state: IngestionState = IngestionState.IDLE
    history: list[IngestionState] = field(default_factory=lambda: [IngestionState.IDLE])

    def transition(self, target: IngestionState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise IngestionStateError(
                f"Cannot move ingestion run from {self.state.value} to {target.value}."
            )
        logger.debug("Ingestion state %s -> %s", self.state.value, target.value)
        self.state = target
        self.history.append(target)

    @property
    def is_terminal(self) -> bool:
        return self.state in (IngestionState.DONE, IngestionState.FAILED)


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-run ingestion summary.
    """

    rows_processed: int
    rows_failed: int
    rows_inserted: int
    batches_written: int
    batch_failures: list[BatchFailure] = field(default_factory=list)
    validation_errors: list[RowValidationError] = field(default_factory=list)
    state: IngestionState = IngestionState.DONE

    @property
    def batches_failed(self) -> int:
        return len(self.batch_failures)


@dataclass(frozen=True)
class AgeBucketShare:
    """
    One age-group row of the distribution report.
    """

    age_group: str
    count: int
    percentage: float
