"""
app/services/age_distribution_service.py

Read-only age distribution report over the users table.

Buckets: ``< 20``, ``20 to 40`` (both ends inclusive), ``40 to 60`` (lower end
exclusive) and ``> 60``. Each bucket reports its share of all rows as a
percentage rounded half-up to two decimals. Empty buckets are omitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.domain.user_record import AgeBucketShare
from db.models.user import User

logger = logging.getLogger(__name__)

AGE_GROUP_ORDER: tuple[str, ...] = ("< 20", "20 to 40", "40 to 60", "> 60")

_TWO_PLACES = Decimal("0.01")


def _age_group_expression():
    return case(
        (User.age < 20, "< 20"),
        (User.age <= 40, "20 to 40"),
        (User.age <= 60, "40 to 60"),
        else_="> 60",
    ).label("age_group")


def _percentage(count: int, total: int) -> float:
    share = (Decimal(count) / Decimal(total)) * Decimal(100)
    return float(share.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class AgeDistributionService:
    """
    Computes and logs the age distribution of ingested users.
    """

    def compute(self, db: Session) -> list[AgeBucketShare]:
        grouped = select(_age_group_expression()).subquery()
        stmt = select(grouped.c.age_group, func.count()).group_by(grouped.c.age_group)
        counts: dict[str, int] = {group: int(count) for group, count in db.execute(stmt).all()}

        total = sum(counts.values())
        if total == 0:
            return []

        return [
            AgeBucketShare(
                age_group=group,
                count=counts[group],
                percentage=_percentage(counts[group], total),
            )
            for group in AGE_GROUP_ORDER
            if counts.get(group)
        ]

    def log_report(self, shares: list[AgeBucketShare]) -> None:
        logger.info("--- Age Distribution Report ---")
        if not shares:
            logger.info("No users stored; nothing to report.")
        for share in shares:
            logger.info("%-10s %6.2f%%", share.age_group, share.percentage)
        logger.info("-------------------------------")


def run_age_distribution_report(
    session_factory: Callable[[], Session],
    service: AgeDistributionService | None = None,
) -> list[AgeBucketShare]:
    """
    Background-task entry point: open a session, compute, and log the report.

    Failures are logged and swallowed; the HTTP response has already been sent.
    """

    service = service or AgeDistributionService()
    logger.info("Calculating age distribution")
    try:
        with session_factory() as db:
            shares = service.compute(db)
    except Exception as exc:  # noqa: BLE001
        logger.error("Error calculating age distribution: %s", exc)
        return []

    service.log_report(shares)
    return shares
