"""Month grid layout and per-day event lookup for the calendar view."""
import calendar
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from release_calendar.dates import format_date, is_same_day
from release_calendar.models import CalendarCell, CalendarEvent

GRID_SIZE = 42  # 6 weeks, Monday first
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def get_month_days(year: int, month: int) -> List[date]:
    """
    Return the 42 days shown for a month (1-12): trailing days of the previous
    month up to the first Monday-started week, the month itself, then leading
    days of the next month. The length never depends on the month.
    """
    first = date(year, month, 1)
    leading = first.weekday()  # Monday = 0
    _, length = calendar.monthrange(year, month)

    days = [first - timedelta(days=i) for i in range(leading, 0, -1)]
    days.extend(date(year, month, d) for d in range(1, length + 1))
    after = first + timedelta(days=length)
    days.extend(after + timedelta(days=i) for i in range(GRID_SIZE - len(days)))
    return days


def bucket_events_by_date(events: Iterable[CalendarEvent]) -> Dict[str, List[CalendarEvent]]:
    buckets: Dict[str, List[CalendarEvent]] = {}
    for e in events:
        buckets.setdefault(e.date, []).append(e)
    return buckets


def events_for_date(buckets: Dict[str, List[CalendarEvent]], day: Union[date, datetime]) -> List[CalendarEvent]:
    # key from the local calendar fields, never from a UTC conversion
    return list(buckets.get(format_date(day), ()))


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def is_current_month(day: Union[date, datetime], year: int, month: int) -> bool:
    return day.year == year and day.month == month


def is_today(day: Union[date, datetime], today: Optional[date] = None) -> bool:
    return is_same_day(day, today or date.today())


def weekday_names() -> List[str]:
    return list(WEEKDAY_NAMES)


def month_name(month: int) -> str:
    return calendar.month_name[month]


def month_year_display(year: int, month: int) -> str:
    return f"{month_name(month)} {year}"


def build_month(year: int, month: int, events: Iterable[CalendarEvent],
                today: Optional[date] = None) -> List[CalendarCell]:
    """Lay out a month grid with each day's events and styling flags."""
    today = today or date.today()
    buckets = bucket_events_by_date(events)
    return [
        CalendarCell(
            day=d,
            events=events_for_date(buckets, d),
            is_today=is_today(d, today),
            is_current_month=is_current_month(d, year, month),
        )
        for d in get_month_days(year, month)
    ]
