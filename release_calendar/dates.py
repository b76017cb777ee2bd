# release_calendar/dates.py
import re
from datetime import date, datetime, timedelta
from typing import Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DateInput = Union[str, date, datetime]

DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ONE_DAY = timedelta(days=1)


class ParseError(ValueError):
    """Raised when a value cannot be read as a calendar date."""
    pass


def parse_date(value: DateInput) -> datetime:
    """
    Parse a date string or date object into a naive local datetime.
    YYYY-MM-DD strings become noon of that day so that adding days never
    crosses a day boundary around DST changes.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 12)
    if not isinstance(value, str):
        raise ParseError(f"Invalid date: {value!r}")

    text = value.strip()
    if DATE_ONLY_RE.match(text):
        year, month, day = (int(p) for p in text.split("-"))
        try:
            return datetime(year, month, day, 12)
        except ValueError as e:
            raise ParseError(f"Invalid date: {value}") from e

    try:
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError) as e:
        raise ParseError(f"Invalid date: {value}") from e
    return parsed.replace(tzinfo=None)


def format_date(d: Union[date, datetime]) -> str:
    """Canonical YYYY-MM-DD form used for storage, event ids and bucketing."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def add_days(d: datetime, days: int) -> datetime:
    return d + timedelta(days=days)


def add_months(d: datetime, months: int) -> datetime:
    """Shift by whole months; the day is clamped to the target month's last day."""
    return d + relativedelta(months=months)


def start_of_day(d: datetime) -> datetime:
    return datetime(d.year, d.month, d.day)


def end_of_day(d: datetime) -> datetime:
    return datetime(d.year, d.month, d.day, 23, 59, 59, 999999)


def is_same_day(a: Union[date, datetime], b: Union[date, datetime]) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def days_between(a: datetime, b: datetime) -> int:
    """Absolute number of whole days between two instants."""
    return abs(b - a) // ONE_DAY


def is_within_range(d: datetime, start: datetime, end: datetime) -> bool:
    """Inclusive on both ends."""
    return start <= d <= end

