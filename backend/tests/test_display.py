"""
Tests for relative start labels on event cards.
"""

from datetime import date, datetime, time

import pytest

from facility_reservations.scheduling.display import describe_start, format_clock

NOW = datetime(2026, 10, 19, 14, 0)
TODAY = NOW.date()


@pytest.mark.parametrize(
    "start_date, time_start, expected",
    [
        (TODAY, time(12, 55), "Started 1 hour ago"),
        (TODAY, time(13, 30), "Started 30 minutes ago"),
        (TODAY, time(13, 59), "Started 1 minute ago"),
        (TODAY, time(13, 59, 30), "Started just now"),
        (TODAY, time(14, 0), "Started just now"),
        (TODAY, time(9, 0), "Started 5 hours ago"),
        (date(2026, 10, 18), time(9, 0), "Started 1 day ago"),
        (date(2026, 10, 17), time(14, 0), "Started 2 days ago"),
        (TODAY, time(16, 30), "Starts at 4:30 PM"),
        (date(2026, 10, 20), time(8, 0), "Upcoming"),
    ],
)
def test_describe_start(start_date, time_start, expected):
    assert describe_start(start_date, time_start, NOW) == expected


def test_morning_start_later_today():
    early = datetime(2026, 10, 19, 7, 0)
    assert describe_start(TODAY, time(9, 5), early) == "Starts at 9:05 AM"


@pytest.mark.parametrize(
    "value, expected",
    [
        (time(0, 0), "12:00 AM"),
        (time(9, 5), "9:05 AM"),
        (time(12, 0), "12:00 PM"),
        (time(23, 45), "11:45 PM"),
    ],
)
def test_format_clock(value, expected):
    assert format_clock(value) == expected
