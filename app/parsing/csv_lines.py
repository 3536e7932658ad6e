"""
app/parsing/csv_lines.py

Line-level reading of comma-delimited input.

This is deliberately not a CSV grammar: there is no quoting or escaping, so a
field path or value cannot contain the delimiter. A data line that splits into
more values than the header has columns is rejected instead of being
silently shifted.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from typing import IO

from app.errors import CSVHeaderValidationError, CSVReadError, MalformedRecordError

DELIMITER = ","
PATH_SEPARATOR = "."


def iter_lines(stream: IO[bytes] | IO[str], *, encoding: str = "utf-8-sig") -> Iterator[str]:
    """
    Lazily yield lines without their line terminator.

    Binary streams are decoded with ``encoding`` (a UTF-8 BOM is dropped).
    Universal-newline decoding makes LF and CRLF input equivalent.
    """

    if isinstance(stream, io.TextIOBase):
        text_stream = stream
        owns_wrapper = False
    else:
        text_stream = io.TextIOWrapper(stream, encoding=encoding, newline=None)
        owns_wrapper = True

    try:
        while True:
            try:
                line = text_stream.readline()
            except UnicodeDecodeError as exc:
                raise CSVReadError(f"CSV must be {encoding} encoded: {exc}") from exc
            except OSError as exc:
                raise CSVReadError(f"Failed to read CSV input: {exc}") from exc
            if not line:
                return
            yield line.rstrip("\r\n")
    finally:
        if owns_wrapper:
            try:
                text_stream.detach()
            except ValueError:
                pass


def parse_header(line: str) -> list[str]:
    """
    Split the header line into ordered field paths such as ``name.firstName``.
    """

    paths = line.split(DELIMITER)
    for index, path in enumerate(paths, start=1):
        if any(segment == "" for segment in path.split(PATH_SEPARATOR)):
            raise CSVHeaderValidationError(
                f"Header column {index} has an empty field path segment: {path!r}."
            )
    return paths


def split_values(line: str, column_count: int) -> list[str]:
    """
    Split one data line. Short lines are allowed; missing trailing values are absent.
    """

    values = line.split(DELIMITER)
    if len(values) > column_count:
        raise MalformedRecordError(
            f"Line has {len(values)} values but the header defines {column_count} columns; "
            "values containing the delimiter are not supported."
        )
    return values
