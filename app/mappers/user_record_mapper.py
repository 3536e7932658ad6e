"""
app/mappers/user_record_mapper.py

Maps nested raw records onto the fixed users table shape.
"""

from __future__ import annotations

from typing import Any, Mapping

from app.domain.user_record import UserRecordInput

MAPPED_FIELDS: frozenset[str] = frozenset({"name", "age", "address"})


def _name_part(name_node: Any, key: str) -> str:
    if not isinstance(name_node, Mapping):
        return ""
    value = name_node.get(key)
    return value if isinstance(value, str) else ""


def _age(value: Any) -> int:
    # An explicit age of 0 cannot be told apart from a missing one; both become 0.
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value or 0


def transform(raw_record: Mapping[str, Any]) -> UserRecordInput:
    """
    Convert one raw record into a ``UserRecordInput``.

    - ``name`` joins ``name.firstName`` and ``name.lastName`` with one space,
      trimmed; empty when neither is present.
    - ``age`` is the parsed integer, or 0 when absent, zero or not a number.
    - ``address`` is passed through unchanged, None when absent.
    - every other top-level key lands in ``additional_info``; None when there
      are none.

    The input is never mutated.
    """

    name_node = raw_record.get("name")
    name = f"{_name_part(name_node, 'firstName')} {_name_part(name_node, 'lastName')}".strip()

    additional_info = {
        key: value for key, value in raw_record.items() if key not in MAPPED_FIELDS
    }

    return UserRecordInput(
        name=name,
        age=_age(raw_record.get("age")),
        address=raw_record.get("address"),
        additional_info=additional_info or None,
    )


class UserRecordMapper:
    """
    Stateless mapper kept as an object so the ingestion service can swap it in tests.
    """

    def map_record(self, raw_record: Mapping[str, Any]) -> UserRecordInput:
        return transform(raw_record)
