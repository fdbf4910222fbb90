# tests/test_datetime_utils.py
"""
Timestamp helper tests.

Usage: python -m pytest tests/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from dogbook.utils.datetime_utils import DateTimeUtils


def test_parse_iso_datetime():
    """All accepted ISO forms come back as UTC-aware datetimes."""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc


def test_parse_iso_datetime_converts_offsets():
    dt = DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00")
    assert dt == datetime(2024, 1, 15, 1, 30, tzinfo=timezone.utc)


def test_for_firestore():
    test_data = {
        'birthdate': date(2020, 1, 15),
        'timestamp': datetime(2024, 1, 15, 10, 30),
        'nested': {
            'event_date': date(2023, 12, 25)
        },
        'list_data': [
            {'created_at': datetime(2024, 1, 1)}
        ],
        'name': "Rex",
    }

    converted = DateTimeUtils.for_firestore(test_data)

    # dates become datetimes
    assert isinstance(converted['birthdate'], datetime)
    assert isinstance(converted['nested']['event_date'], datetime)
    assert isinstance(converted['list_data'][0]['created_at'], datetime)

    assert converted['birthdate'].tzinfo == timezone.utc
    assert converted['timestamp'].tzinfo == timezone.utc
    assert converted['name'] == "Rex"


def test_from_firestore_normalises_to_utc():
    seoul = timezone(timedelta(hours=9))
    data = {
        'created_at': datetime(2024, 1, 15, 19, 30, tzinfo=seoul),
        'updated_at': datetime(2024, 1, 15, 10, 30),
        'likes': ["a", "b"],
    }

    converted = DateTimeUtils.from_firestore(data)

    assert converted['created_at'] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['updated_at'].tzinfo == timezone.utc
    assert converted['likes'] == ["a", "b"]


def test_now_is_timezone_aware():
    assert DateTimeUtils.now().tzinfo == timezone.utc


def test_error_handling():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
