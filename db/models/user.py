"""
db/models/user.py

Relational target of CSV ingestion: one row per input line.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests). Python None is
# stored as SQL NULL rather than the JSON literal 'null'.
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[Any | None] = mapped_column(
        JSONDocument,
        nullable=True,
        comment="Nested address.* columns from the source file",
    )
    additional_info: Mapped[dict[str, Any] | None] = mapped_column(
        JSONDocument,
        nullable=True,
        comment="Every source column outside name, age and address",
    )
