"""Tests for timestamp parsing and formatting."""

from datetime import datetime, timedelta, timezone

import pytest

from blogdoc.errors import MalformedDateError
from blogdoc.services.parsing.dates import format_timestamp, parse_timestamp


@pytest.mark.parametrize(
    "raw",
    [
        "2024-06-29 12:00:00 -0300",
        "2024-06-29 12:00:00 -03:00",
        "2024-06-29T12:00:00-03:00",
        "2024-06-29 12:00 -0300",
        "2024-06-29 15:00:00 Z",
        "2024-06-29T15:00:00Z",
        "2024-06-29 15:00:00 +0000",
    ],
)
def test_accepted_shapes_land_on_same_instant(raw):
    assert parse_timestamp(raw) == datetime(2024, 6, 29, 15, 0, tzinfo=timezone.utc)


def test_fractional_seconds():
    parsed = parse_timestamp("2024-06-29 12:00:00.25 +0100")
    assert parsed.microsecond == 250000
    assert parsed.utcoffset() == timedelta(hours=1)


def test_aware_datetime_passes_through():
    value = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp(value) is value


@pytest.mark.parametrize(
    "raw",
    [
        datetime(2024, 1, 1),  # naive
        "2024-06-29 12:00:00",
        "2024-06-29 25:00:00 +0000",
        "2024-06-29 12:00:00 +2500",
        "June 29, 2024",
        20240629,
        None,
    ],
)
def test_rejected_values(raw):
    with pytest.raises(MalformedDateError):
        parse_timestamp(raw, "date")


def test_error_names_the_field():
    with pytest.raises(MalformedDateError) as exc_info:
        parse_timestamp("nope", "last_modified_at")
    assert exc_info.value.field == "last_modified_at"
    assert "last_modified_at" in str(exc_info.value)


def test_format_keeps_original_offset():
    value = parse_timestamp("2024-06-29 12:00:00 -0300")
    assert format_timestamp(value) == "2024-06-29 12:00:00 -0300"


def test_format_round_trips_microseconds():
    value = parse_timestamp("2024-06-29 12:00:00.5 +0530")
    assert parse_timestamp(format_timestamp(value)) == value


def test_format_pads_years_before_1000():
    value = parse_timestamp("0999-06-29 12:00:00 -0300")
    assert format_timestamp(value) == "0999-06-29 12:00:00 -0300"
    assert parse_timestamp(format_timestamp(value)) == value
