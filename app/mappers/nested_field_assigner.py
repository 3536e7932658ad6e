"""
app/mappers/nested_field_assigner.py

Builds a nested raw record from header field paths and line values.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Sequence

from app.errors import MalformedRecordError
from app.parsing.csv_lines import PATH_SEPARATOR

logger = logging.getLogger(__name__)

AGE_PATH = "age"

# Stored for an age value with no leading integer; the record mapper treats
# it like an absent age.
NOT_A_NUMBER = math.nan

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")

RawRecord = dict[str, Any]


def parse_leading_int(raw_value: str) -> int | float:
    """
    Parse the leading base-10 integer of ``raw_value``.

    ``"34"`` -> 34, ``" 34 years"`` -> 34, ``"3.9"`` -> 3. Input without a
    leading integer returns ``NOT_A_NUMBER``.
    """

    match = _LEADING_INTEGER.match(raw_value)
    if match is None:
        return NOT_A_NUMBER
    return int(match.group(1))


def assign(record: RawRecord, path: str, raw_value: str | None) -> None:
    """
    Write ``raw_value`` at ``path`` inside ``record``, creating nested dicts on demand.

    Empty or missing values are skipped entirely. The top-level ``age`` path
    is stored as an integer.
    """

    if raw_value is None or raw_value == "":
        return

    keys = path.split(PATH_SEPARATOR)
    current = record
    for depth, key in enumerate(keys[:-1]):
        node = current.get(key)
        if node is None:
            node = {}
            current[key] = node
        elif not isinstance(node, dict):
            parent = PATH_SEPARATOR.join(keys[: depth + 1])
            raise MalformedRecordError(
                f"Cannot assign {path!r}: {parent!r} already holds a value.",
                path=path,
                value=raw_value,
            )
        current = node

    last_key = keys[-1]
    if isinstance(current.get(last_key), dict):
        raise MalformedRecordError(
            f"Cannot assign {path!r}: it already holds nested fields.",
            path=path,
            value=raw_value,
        )

    if path == AGE_PATH:
        parsed = parse_leading_int(raw_value)
        if isinstance(parsed, float):
            logger.warning("Non-integer age value %r; it will default to 0", raw_value)
        current[last_key] = parsed
    else:
        current[last_key] = raw_value


def build_raw_record(headers: Sequence[str], values: Sequence[str]) -> RawRecord:
    """
    Assemble one raw record; columns past the end of ``values`` are absent.
    """

    record: RawRecord = {}
    for index, path in enumerate(headers):
        value = values[index] if index < len(values) else None
        assign(record, path, value)
    return record
