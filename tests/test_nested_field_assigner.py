from __future__ import annotations

import math
import unittest

from app.errors import MalformedRecordError
from app.mappers.nested_field_assigner import assign, build_raw_record, parse_leading_int


class TestAssign(unittest.TestCase):
    def test_creates_intermediate_levels_on_demand(self) -> None:
        record: dict = {}

        assign(record, "address.geo.city", "Paris")
        assign(record, "address.zip", "75001")

        self.assertEqual(record, {"address": {"geo": {"city": "Paris"}, "zip": "75001"}})

    def test_empty_value_is_omitted(self) -> None:
        record: dict = {}

        assign(record, "name.firstName", "")
        assign(record, "hobby", None)

        self.assertEqual(record, {})

    def test_age_is_stored_as_integer(self) -> None:
        record: dict = {}

        assign(record, "age", "34")

        self.assertEqual(record, {"age": 34})
        self.assertIsInstance(record["age"], int)

    def test_non_numeric_age_stores_not_a_number(self) -> None:
        record: dict = {}

        with self.assertLogs("app.mappers.nested_field_assigner", level="WARNING"):
            assign(record, "age", "unknown")

        self.assertTrue(math.isnan(record["age"]))

    def test_arabic_indic_age_stores_not_a_number(self) -> None:
        record: dict = {}

        with self.assertLogs("app.mappers.nested_field_assigner", level="WARNING"):
            assign(record, "age", "\u0663\u0664")

        self.assertTrue(math.isnan(record["age"]))

    def test_only_top_level_age_is_parsed(self) -> None:
        record: dict = {}

        assign(record, "child.age", "7")

        self.assertEqual(record, {"child": {"age": "7"}})

    def test_other_values_are_stored_verbatim(self) -> None:
        record: dict = {}

        assign(record, "note", "  spaced  ")

        self.assertEqual(record, {"note": "  spaced  "})

    def test_leaf_in_intermediate_position_raises(self) -> None:
        record: dict = {}
        assign(record, "name", "Ann")

        with self.assertRaises(MalformedRecordError) as ctx:
            assign(record, "name.firstName", "Ann")

        self.assertEqual(ctx.exception.path, "name.firstName")
        self.assertEqual(record, {"name": "Ann"})

    def test_leaf_never_replaces_nested_fields(self) -> None:
        record: dict = {}
        assign(record, "name.firstName", "Ann")

        with self.assertRaises(MalformedRecordError):
            assign(record, "name", "Ann Lee")

        self.assertEqual(record, {"name": {"firstName": "Ann"}})


class TestParseLeadingInt(unittest.TestCase):
    def test_parses_leading_integer(self) -> None:
        self.assertEqual(parse_leading_int("42"), 42)
        self.assertEqual(parse_leading_int(" 42"), 42)
        self.assertEqual(parse_leading_int("42 years"), 42)
        self.assertEqual(parse_leading_int("3.9"), 3)
        self.assertEqual(parse_leading_int("-5"), -5)

    def test_returns_not_a_number_without_leading_digits(self) -> None:
        self.assertTrue(math.isnan(parse_leading_int("abc")))
        self.assertTrue(math.isnan(parse_leading_int("x42")))

    def test_only_ascii_digits_count(self) -> None:
        self.assertTrue(math.isnan(parse_leading_int("\u0663\u0664")))
        self.assertEqual(parse_leading_int("7\u0663"), 7)


class TestBuildRawRecord(unittest.TestCase):
    def test_missing_trailing_values_are_absent(self) -> None:
        record = build_raw_record(["name.firstName", "age", "hobby"], ["Ann"])

        self.assertEqual(record, {"name": {"firstName": "Ann"}})

    def test_builds_fresh_record_per_line(self) -> None:
        headers = ["name.firstName"]

        first = build_raw_record(headers, ["Ann"])
        second = build_raw_record(headers, ["Bob"])

        self.assertIsNot(first, second)
        self.assertEqual(first["name"]["firstName"], "Ann")
