"""Tests for property value shaping."""

from datetime import datetime, timezone

import pytest

from noti.errors import ErrorCode, NotiUnsupportedPropertyError, NotiValidationError
from noti.properties import (
    build_page_properties,
    build_property_payload,
    convert_input_value,
    extract_property_value,
    format_cell_value,
    format_schema,
    parse_date,
    to_iso_string,
    validate_input_value,
)


def _runs(*texts):
    return [{"plain_text": t} for t in texts]


class TestExtractPropertyValue:
    @pytest.mark.parametrize(("prop", "expected"), [
        ({"type": "title", "title": _runs("Hello", " World")}, "Hello World"),
        ({"type": "rich_text", "rich_text": []}, ""),
        ({"type": "number", "number": 42}, "42"),
        ({"type": "number", "number": 2.5}, "2.5"),
        ({"type": "number", "number": None}, ""),
        ({"type": "select", "select": {"name": "High"}}, "High"),
        ({"type": "select", "select": None}, ""),
        ({"type": "multi_select", "multi_select": [{"name": "a"}, {"name": "b"}]}, "a, b"),
        ({"type": "status", "status": {"name": "Done"}}, "Done"),
        ({"type": "date", "date": {"start": "2024-01-01"}}, "2024-01-01"),
        ({"type": "date", "date": {"start": "2024-01-01", "end": "2024-01-31"}}, "2024-01-01 → 2024-01-31"),
        ({"type": "date", "date": None}, ""),
        ({"type": "checkbox", "checkbox": True}, "☑"),
        ({"type": "checkbox", "checkbox": False}, "☐"),
        ({"type": "url", "url": "https://x.example"}, "https://x.example"),
        ({"type": "email", "email": None}, ""),
        ({"type": "phone_number", "phone_number": "+81 90"}, "+81 90"),
        ({"type": "created_time", "created_time": "2024-01-01T00:00:00Z"}, "2024-01-01T00:00:00Z"),
        ({"type": "formula", "formula": {"type": "string", "string": "calc"}}, "calc"),
        ({"type": "formula", "formula": {"type": "number", "number": 7}}, "7"),
        ({"type": "relation", "relation": [{"id": "r1"}, {"id": "r2"}]}, "r1, r2"),
        ({"type": "rollup", "rollup": {}}, ""),
    ])
    def test_values(self, prop, expected):
        assert extract_property_value(prop) == expected


class TestFormatCellValue:
    @pytest.mark.parametrize(("prop", "expected"), [
        (None, ""),
        ({"type": "title", "title": _runs("first", "second")}, "first"),
        ({"type": "multi_select", "multi_select": [{"name": "a"}, {"name": "b"}]}, "a;b"),
        ({"type": "checkbox", "checkbox": True}, "true"),
        ({"type": "checkbox", "checkbox": False}, "false"),
        ({"type": "number", "number": 0}, "0"),
        ({"type": "date", "date": {"start": "2024-01-01", "end": "2024-02-01"}}, "2024-01-01"),
        ({"type": "relation", "relation": [{"id": "x"}]}, ""),
    ])
    def test_values(self, prop, expected):
        assert format_cell_value(prop) == expected


class TestInputValues:
    @pytest.mark.parametrize(("value", "prop_type", "expected"), [
        ("12", "number", True),
        ("1.5", "number", True),
        ("abc", "number", False),
        ("TRUE", "checkbox", True),
        ("yes", "checkbox", False),
        ("2024-01-15", "date", True),
        ("2024-01-15T10:00:00Z", "date", True),
        ("not a date", "date", False),
        ("anything", "rich_text", True),
    ])
    def test_validate(self, value, prop_type, expected):
        assert validate_input_value(value, prop_type) is expected

    def test_convert_number(self):
        assert convert_input_value("12", "number") == 12
        assert convert_input_value("1.5", "number") == 1.5

    def test_convert_checkbox(self):
        assert convert_input_value("True", "checkbox") is True
        assert convert_input_value("false", "checkbox") is False

    def test_convert_date(self):
        assert convert_input_value("2024-01-15", "date") == {"start": "2024-01-15T00:00:00.000Z"}

    def test_convert_other_passthrough(self):
        assert convert_input_value("text", "select") == "text"

    def test_convert_invalid_raises(self):
        with pytest.raises(NotiValidationError) as exc_info:
            convert_input_value("abc", "number")
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_iso_string_converts_to_utc(self):
        moment = parse_date("2024-01-15T09:30:00.250+09:00")
        assert to_iso_string(moment) == "2024-01-15T00:30:00.250Z"

    def test_naive_dates_are_utc(self):
        assert parse_date("2024-01-15") == datetime(2024, 1, 15, tzinfo=timezone.utc)


class TestBuildPropertyPayload:
    @pytest.mark.parametrize(("value", "prop_type", "expected"), [
        ("T", "title", {"title": [{"text": {"content": "T"}}]}),
        ("R", "rich_text", {"rich_text": [{"text": {"content": "R"}}]}),
        (3, "number", {"number": 3}),
        ("High", "select", {"select": {"name": "High"}}),
        (["a", "b"], "multi_select", {"multi_select": [{"name": "a"}, {"name": "b"}]}),
        (True, "checkbox", {"checkbox": True}),
        ({"start": "2024-01-01"}, "date", {"date": {"start": "2024-01-01"}}),
        ("https://x.example", "url", {"url": "https://x.example"}),
        ("a@b.example", "email", {"email": "a@b.example"}),
        ("123", "phone_number", {"phone_number": "123"}),
    ])
    def test_payloads(self, value, prop_type, expected):
        assert build_property_payload(value, prop_type) == expected

    def test_unsupported_type(self):
        with pytest.raises(NotiUnsupportedPropertyError) as exc_info:
            build_property_payload("x", "formula")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_PROPERTY
        assert exc_info.value.context == {"property_type": "formula"}

    def test_page_properties_skip_unknown_keys(self):
        schema = {"Name": {"type": "title"}, "Count": {"type": "number"}}
        payload = build_page_properties({"Name": "n", "Count": 2, "Extra": "x"}, schema)
        assert payload == {
            "Name": {"title": [{"text": {"content": "n"}}]},
            "Count": {"number": 2},
        }

    def test_page_properties_name_the_failing_key(self):
        with pytest.raises(NotiUnsupportedPropertyError, match='"Files"'):
            build_page_properties({"Files": "x"}, {"Files": {"type": "files"}})


class TestFormatSchema:
    def test_table(self):
        properties = {
            "Name": {"type": "title", "title": {}},
            "Status": {"type": "select", "select": {"options": [{"name": "Todo"}, {"name": "Done"}]}},
            "Priority": {"type": "number", "number": {"format": "number"}},
        }
        lines = format_schema(properties).split("\n")
        assert lines[0] == "Name      Type    Detail"
        assert lines[1] == "────────  ──────  " + "─" * 20
        assert lines[2].rstrip() == "Name      title"
        assert lines[3] == "Status    select  [Todo, Done]"
        assert lines[4] == "Priority  number  (number)"

    def test_minimum_column_width(self):
        lines = format_schema({"A": {"type": "url"}}).split("\n")
        assert lines[0] == "Name  Type  Detail"

    def test_empty(self):
        assert format_schema({}) == "No properties"
