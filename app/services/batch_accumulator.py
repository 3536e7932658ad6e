"""
app/services/batch_accumulator.py

Fixed-capacity buffer between record mapping and batch persistence.
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_BATCH_CAPACITY = 1000


class BatchAccumulator(Generic[T]):
    """
    Buffers records until ``capacity`` is reached. Flushing is driven by the caller.
    """

    def __init__(self, capacity: int = DEFAULT_BATCH_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Batch capacity must be at least 1.")
        self._capacity = capacity
        self._buffer: list[T] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, record: T) -> bool:
        """
        Append one record; return True once the batch is full and should be drained.
        """

        self._buffer.append(record)
        return len(self._buffer) >= self._capacity

    def drain(self) -> list[T]:
        """
        Hand over the buffered records and start a fresh, empty batch.
        """

        batch = self._buffer
        self._buffer = []
        return batch

    def __len__(self) -> int:
        return len(self._buffer)
