"""
tests/test_user_record_mapper.py

Pytest unit tests for the raw-record to users-row mapping.

All tests are pure Python, no database. Mapping is a pure function, so the
same raw record must always produce the same row.
"""

from __future__ import annotations

import copy

import pytest

from app.domain.user_record import UserRecordInput
from app.mappers.nested_field_assigner import NOT_A_NUMBER, build_raw_record
from app.mappers.user_record_mapper import UserRecordMapper, transform
from app.parsing.csv_lines import parse_header, split_values


def _map_line(header_line: str, line: str) -> UserRecordInput:
    headers = parse_header(header_line)
    return transform(build_raw_record(headers, split_values(line, len(headers))))


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------


class TestFieldMapping:
    def test_maps_every_path_to_its_column(self) -> None:
        record = _map_line(
            "name.firstName,name.lastName,age,address.city,hobby",
            "Ann,Lee,34,Paris,chess",
        )

        assert record == UserRecordInput(
            name="Ann Lee",
            age=34,
            address={"city": "Paris"},
            additional_info={"hobby": "chess"},
        )

    def test_nested_unmapped_fields_keep_their_shape(self) -> None:
        record = _map_line(
            "name.firstName,contact.email,contact.phone.mobile",
            "Ann,ann@example.com,555",
        )

        assert record.additional_info == {
            "contact": {"email": "ann@example.com", "phone": {"mobile": "555"}}
        }

    def test_address_leaf_is_passed_through(self) -> None:
        record = transform({"address": "1 Main St"})

        assert record.address == "1 Main St"


# ---------------------------------------------------------------------------
# Name
# ---------------------------------------------------------------------------


class TestName:
    def test_first_name_only_is_trimmed(self) -> None:
        assert transform({"name": {"firstName": "Ann"}}).name == "Ann"

    def test_last_name_only_is_trimmed(self) -> None:
        assert transform({"name": {"lastName": "Lee"}}).name == "Lee"

    def test_missing_name_is_empty_string(self) -> None:
        assert transform({}).name == ""

    def test_name_leaf_without_sub_fields_is_empty_string(self) -> None:
        assert transform({"name": "Ann Lee"}).name == ""


# ---------------------------------------------------------------------------
# Age
# ---------------------------------------------------------------------------


class TestAge:
    def test_empty_age_value_defaults_to_zero(self) -> None:
        record = _map_line("age", "")

        assert record.age == 0

    def test_not_a_number_defaults_to_zero(self) -> None:
        assert transform({"age": NOT_A_NUMBER}).age == 0

    def test_explicit_zero_is_indistinguishable_from_absent(self) -> None:
        assert transform({"age": 0}) == transform({})

    def test_negative_age_is_kept(self) -> None:
        assert transform({"age": -3}).age == -3

    @pytest.mark.parametrize("value", ["34", {"years": "34"}, True])
    def test_non_integer_values_default_to_zero(self, value: object) -> None:
        assert transform({"age": value}).age == 0


# ---------------------------------------------------------------------------
# Defaults and purity
# ---------------------------------------------------------------------------


class TestDefaultsAndPurity:
    def test_empty_record_yields_defaults(self) -> None:
        record = transform({})

        assert record == UserRecordInput(name="", age=0, address=None, additional_info=None)

    def test_additional_info_is_none_when_only_mapped_fields(self) -> None:
        record = transform({"name": {"firstName": "Ann"}, "age": 3, "address": {"city": "Oslo"}})

        assert record.additional_info is None

    def test_transform_is_idempotent(self) -> None:
        raw = build_raw_record(["name.firstName", "age", "team"], ["Ann", "30", "blue"])

        assert transform(raw) == transform(raw)

    def test_input_is_not_mutated(self) -> None:
        raw = build_raw_record(["name.firstName", "age", "team"], ["Ann", "30", "blue"])
        snapshot = copy.deepcopy(raw)

        transform(raw)

        assert raw == snapshot

    def test_mapper_object_delegates_to_transform(self) -> None:
        raw = {"name": {"firstName": "Ann"}, "team": "blue"}

        assert UserRecordMapper().map_record(raw) == transform(raw)
