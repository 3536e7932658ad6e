"""
tests/test_age_distribution.py

Age distribution report, including the end-to-end path from a CSV file
through ingestion into SQLite and back out as bucket percentages.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from app.domain.user_record import AgeBucketShare, UserRecordInput
from app.repositories.user_repository import UserRepository
from app.services.age_distribution_service import (
    AgeDistributionService,
    run_age_distribution_report,
)
from app.services.csv_ingestion_service import CSVIngestionService


def _percentages(shares: list[AgeBucketShare]) -> dict[str, float]:
    return {share.age_group: share.percentage for share in shares}


class TestEndToEnd:
    def test_three_row_file_splits_into_three_buckets(self, tmp_path: Path, db_session: Session) -> None:
        path = tmp_path / "users.csv"
        path.write_text("name.firstName,age\nA,15\nB,25\nC,65", encoding="utf-8")

        summary = CSVIngestionService(batch_size=1000).ingest_file(path=path, db=db_session)
        shares = AgeDistributionService().compute(db_session)

        assert summary.rows_inserted == 3
        assert _percentages(shares) == {"< 20": 33.33, "20 to 40": 33.33, "> 60": 33.33}
        assert [share.age_group for share in shares] == ["< 20", "20 to 40", "> 60"]


class TestBuckets:
    def test_bucket_boundaries(self, db_session: Session) -> None:
        ages = [19, 20, 40, 41, 60, 61]
        UserRepository(db_session).insert_batch([UserRecordInput(name=str(age), age=age) for age in ages])

        shares = AgeDistributionService().compute(db_session)

        assert [(share.age_group, share.count) for share in shares] == [
            ("< 20", 1),
            ("20 to 40", 2),
            ("40 to 60", 2),
            ("> 60", 1),
        ]
        assert [share.percentage for share in shares] == [16.67, 33.33, 33.33, 16.67]

    def test_defaulted_ages_count_as_under_twenty(self, db_session: Session) -> None:
        UserRepository(db_session).insert_batch(
            [UserRecordInput(name="a", age=0), UserRecordInput(name="b", age=30)]
        )

        shares = AgeDistributionService().compute(db_session)

        assert _percentages(shares) == {"< 20": 50.0, "20 to 40": 50.0}

    def test_empty_table_reports_nothing(self, db_session: Session) -> None:
        assert AgeDistributionService().compute(db_session) == []


class TestBackgroundReport:
    def test_opens_its_own_session(self, session_factory: sessionmaker[Session]) -> None:
        with session_factory() as db:
            UserRepository(db).insert_batch([UserRecordInput(name="a", age=70)])

        shares = run_age_distribution_report(session_factory)

        assert _percentages(shares) == {"> 60": 100.0}

    def test_failures_are_logged_and_swallowed(self, caplog) -> None:
        def broken_factory() -> Session:
            raise RuntimeError("pool exhausted")

        with caplog.at_level("ERROR"):
            shares = run_age_distribution_report(broken_factory)

        assert shares == []
        assert "pool exhausted" in caplog.text
