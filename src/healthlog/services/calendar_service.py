"""
Calendar grid support for the healthlog application.

Builds the Sunday-first month layout used by the calendar view, handles
month-to-month navigation and collects per-day activity counts for the
calendar markers.

Classes:
    MonthCursor: A displayed (year, month) with previous/next navigation

Functions:
    month_grid: Day numbers of a month padded for a Sunday-first grid
    month_activity_counts: Activity count per day of a month
"""

import calendar
from datetime import date
from typing import Dict, List, NamedTuple

from .activity_store import ActivityStore, DateLike

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class MonthCursor(NamedTuple):
    """The month currently displayed by the calendar grid."""

    year: int
    month: int

    @classmethod
    def for_date(cls, day: DateLike) -> "MonthCursor":
        return cls(day.year, day.month)

    def previous(self) -> "MonthCursor":
        if self.month == 1:
            return MonthCursor(self.year - 1, 12)
        return MonthCursor(self.year, self.month - 1)

    def next(self) -> "MonthCursor":
        if self.month == 12:
            return MonthCursor(self.year + 1, 1)
        return MonthCursor(self.year, self.month + 1)

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month


def month_grid(year: int, month: int) -> List[int]:
    """
    Lay out a month for a seven-column, Sunday-first grid.

    Blank cells before the first of the month are 0, followed by the day
    numbers 1 through the last day of the month. Trailing cells are not
    padded.

    Example:
        >>> month_grid(2024, 3)[:7]
        [0, 0, 0, 0, 0, 1, 2]
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    # calendar.monthrange counts Monday as 0
    offset = (first_weekday + 1) % 7
    return [0] * offset + list(range(1, days_in_month + 1))


def month_activity_counts(store: ActivityStore, year: int, month: int) -> Dict[int, int]:
    """
    Count activities per day of a month.

    Only days with at least one activity appear in the result.

    Args:
        store: Store to read activities from
        year: Displayed year
        month: Displayed month (1-12)

    Returns:
        Mapping of day-of-month to activity count
    """
    cursor = MonthCursor(year, month)
    counts: Dict[int, int] = {}
    for activity in store.activities:
        day = store.calendar_day(activity.timestamp)
        if cursor.contains(day):
            counts[day.day] = counts.get(day.day, 0) + 1
    return counts
