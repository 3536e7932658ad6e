"""
app/repositories/user_repository.py

Persistence layer for ingested user rows.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.user_record import UserRecordInput
from app.errors import BatchWriteError
from db.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for batch persistence of user rows.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_batch(
        self,
        rows: Sequence[UserRecordInput],
        *,
        batch_number: int = 1,
    ) -> int:
        """
        Insert ``rows`` with one multi-row INSERT and commit it.

        The whole batch is committed or rolled back together; on failure a
        ``BatchWriteError`` naming ``batch_number`` is raised.
        """

        if not rows:
            return 0

        payloads: list[dict[str, Any]] = [
            {
                "name": row.name,
                "age": row.age,
                "address": row.address,
                "additional_info": row.additional_info,
            }
            for row in rows
        ]

        stmt = insert(User).values(payloads)
        try:
            self._session.execute(stmt)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise BatchWriteError(
                batch_number=batch_number,
                size=len(payloads),
                reason=exc.__class__.__name__,
            ) from exc

        logger.info("Inserted batch %d of %d records", batch_number, len(payloads))
        return len(payloads)
