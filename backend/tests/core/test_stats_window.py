"""Stats Window: pure period -> [start, end] arithmetic.

Tests cover:
    - day: midnight .. 23:59:59 of the same day
    - week: ISO Monday .. Sunday, including when "now" is a Sunday or Monday
    - month: 1st .. last second of the month, across December and February
    - unknown keyword resolves to month
    - timezone of "now" is preserved
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.domain_types import StatsPeriod
from app.core.stats_window import resolve_stats_window

WIB = timezone(timedelta(hours=7))


def test_day_window():
    window = resolve_stats_window("day", datetime(2024, 3, 15, 14, 5, 9))
    assert window.start == datetime(2024, 3, 15, 0, 0, 0)
    assert window.end == datetime(2024, 3, 15, 23, 59, 59)


@pytest.mark.parametrize("now,monday", [
    (datetime(2024, 3, 15, 12, 0), datetime(2024, 3, 11)),   # Friday
    (datetime(2024, 3, 17, 23, 59), datetime(2024, 3, 11)),  # Sunday belongs to the previous Monday
    (datetime(2024, 3, 11, 0, 0), datetime(2024, 3, 11)),    # Monday itself
    (datetime(2024, 1, 2, 9, 0), datetime(2024, 1, 1)),
    (datetime(2023, 12, 31, 9, 0), datetime(2023, 12, 25)),
])
def test_week_window_is_iso_monday_to_sunday(now, monday):
    window = resolve_stats_window(StatsPeriod.WEEK, now)
    assert window.start == monday
    assert window.end == monday + timedelta(days=7) - timedelta(seconds=1)
    assert window.end.isoweekday() == 7


@pytest.mark.parametrize("now,start,end", [
    (datetime(2024, 3, 15), datetime(2024, 3, 1), datetime(2024, 3, 31, 23, 59, 59)),
    (datetime(2024, 2, 10), datetime(2024, 2, 1), datetime(2024, 2, 29, 23, 59, 59)),
    (datetime(2023, 2, 10), datetime(2023, 2, 1), datetime(2023, 2, 28, 23, 59, 59)),
    (datetime(2024, 12, 31, 23, 0), datetime(2024, 12, 1), datetime(2024, 12, 31, 23, 59, 59)),
])
def test_month_window(now, start, end):
    window = resolve_stats_window("month", now)
    assert (window.start, window.end) == (start, end)


def test_unknown_period_is_month():
    now = datetime(2024, 3, 15)
    assert resolve_stats_window("quarter", now) == resolve_stats_window("month", now)
    assert resolve_stats_window(None, now) == resolve_stats_window("month", now)


def test_window_keeps_timezone_of_now():
    window = resolve_stats_window("day", datetime(2024, 3, 15, 1, 0, tzinfo=WIB))
    assert window.start.tzinfo is WIB
    assert window.start_date.isoformat() == "2024-03-15"
    assert window.end_date.isoformat() == "2024-03-15"
