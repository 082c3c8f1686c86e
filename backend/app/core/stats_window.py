"""Stats Window: resolves a period keyword into an inclusive wall-clock window.

Invariants:
    - PURE: depends only on (period, now); no IO, no clock reads
    - start is always 00:00:00 of its day; end is always one second before the
      next period begins (23:59:59 of the last day)
    - Weeks are ISO weeks: Monday 00:00:00 through Sunday 23:59:59
    - Unknown periods resolve to the current month

Design Decisions:
    - `now` is passed in (not read here) so window arithmetic is testable across
      month/year boundaries and Sundays
    - Timezone of `now` is preserved: the window is in the caller's local time
"""

from datetime import datetime, timedelta

from app.core.domain_types import StatsPeriod
from app.core.records import StatsWindow

_ONE_SECOND = timedelta(seconds=1)


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _first_of_next_month(first: datetime) -> datetime:
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def resolve_stats_window(period: StatsPeriod | str | None, now: datetime) -> StatsWindow:
    """Map period keyword + now to an inclusive [start, end] window."""
    if not isinstance(period, StatsPeriod):
        period = StatsPeriod.parse(period)

    today = _midnight(now)

    if period is StatsPeriod.DAY:
        start = today
        end = start + timedelta(days=1) - _ONE_SECOND
    elif period is StatsPeriod.WEEK:
        # isoweekday(): Monday=1 .. Sunday=7
        start = today - timedelta(days=now.isoweekday() - 1)
        end = start + timedelta(days=7) - _ONE_SECOND
    else:
        start = today.replace(day=1)
        end = _first_of_next_month(start) - _ONE_SECOND

    return StatsWindow(start=start, end=end)
