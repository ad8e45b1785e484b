"""
Rolling booking calendar
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

# Friday and Saturday form the weekend in the UAE
WEEKEND_DAYS = frozenset({4, 5})
DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class CalendarDay:
    """One bookable day in the calendar window"""
    index: int
    date: date
    label: str
    day: int
    month: str
    is_weekend: bool
    readable: str
    iso: str

    @classmethod
    def from_date(cls, index: int, value: date) -> "CalendarDay":
        return cls(
            index=index,
            date=value,
            label=value.strftime("%a"),
            day=value.day,
            month=value.strftime("%b"),
            is_weekend=value.weekday() in WEEKEND_DAYS,
            readable=f"{value:%A} {value.day} {value:%B}",
            iso=value.isoformat(),
        )


def today_in(tz_name: str) -> date:
    """Current date in the cinema's timezone"""
    return datetime.now(ZoneInfo(tz_name)).date()


def build_calendar_window(
    today: Optional[date] = None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> List[CalendarDay]:
    """
    Consecutive days starting at ``today``, indexed from zero.
    """
    start = today or date.today()
    return [
        CalendarDay.from_date(index, start + timedelta(days=index))
        for index in range(days)
    ]


def find_day(window: List[CalendarDay], iso: str) -> Optional[CalendarDay]:
    for day in window:
        if day.iso == iso:
            return day
    return None
