import pytest
from datetime import date, datetime
from release_calendar.models import CalendarEvent
from release_calendar.grid import (
    GRID_SIZE, get_month_days, bucket_events_by_date, events_for_date, previous_month,
    next_month, is_current_month, is_today, weekday_names, month_year_display, build_month,
)

def ev(eid, day, title="T"):
    return CalendarEvent(id=eid, series_id="s", date=day, episode_number=1, season=1, title=title)

# ---------- get_month_days ----------
@pytest.mark.parametrize("year, month", [
    (2024, 2),   # leap February
    (2023, 2),
    (2026, 2),   # February starting on a Sunday
    (2024, 12),
    (2025, 1),
    (2024, 9),   # 30 days starting on a Sunday
    (2021, 2),   # 28 days starting on a Monday
])
def test_grid_is_always_42_consecutive_days(year, month):
    days = get_month_days(year, month)
    assert len(days) == GRID_SIZE
    assert days[0].weekday() == 0
    for a, b in zip(days, days[1:]):
        assert (b - a).days == 1

def test_grid_january_2024_starts_on_monday():
    days = get_month_days(2024, 1)
    assert days[0] == date(2024, 1, 1)
    assert days[30] == date(2024, 1, 31)
    assert days[-1] == date(2024, 2, 11)

def test_grid_pads_from_previous_month():
    days = get_month_days(2024, 3)  # March 1st 2024 is a Friday
    assert days[:4] == [date(2024, 2, 26), date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29)]
    assert days[4] == date(2024, 3, 1)

def test_grid_across_year_boundary():
    days = get_month_days(2025, 1)  # Wednesday
    assert days[0] == date(2024, 12, 30)
    dec = get_month_days(2024, 12)  # Sunday
    assert dec[0] == date(2024, 11, 25)
    assert dec[-1] == date(2025, 1, 5)

# ---------- bucketing ----------
def test_bucket_events_by_date_keeps_order():
    events = [ev("a", "2024-01-01"), ev("b", "2024-01-02"), ev("c", "2024-01-01")]
    buckets = bucket_events_by_date(events)
    assert [e.id for e in buckets["2024-01-01"]] == ["a", "c"]
    assert [e.id for e in buckets["2024-01-02"]] == ["b"]

def test_events_for_date_uses_local_fields():
    buckets = bucket_events_by_date([ev("a", "2024-01-01")])
    assert [e.id for e in events_for_date(buckets, date(2024, 1, 1))] == ["a"]
    assert [e.id for e in events_for_date(buckets, datetime(2024, 1, 1, 23, 59))] == ["a"]
    assert events_for_date(buckets, date(2024, 1, 2)) == []

def test_events_for_date_returns_copy():
    buckets = bucket_events_by_date([ev("a", "2024-01-01")])
    events_for_date(buckets, date(2024, 1, 1)).clear()
    assert len(buckets["2024-01-01"]) == 1

# ---------- navigation / predicates ----------
@pytest.mark.parametrize("ym, prev, nxt", [
    ((2024, 1), (2023, 12), (2024, 2)),
    ((2024, 12), (2024, 11), (2025, 1)),
    ((2024, 6), (2024, 5), (2024, 7)),
])
def test_month_navigation_wraps(ym, prev, nxt):
    assert previous_month(*ym) == prev
    assert next_month(*ym) == nxt

def test_predicates():
    assert is_current_month(date(2024, 2, 29), 2024, 2)
    assert not is_current_month(date(2024, 3, 1), 2024, 2)
    assert is_today(date(2024, 2, 29), today=date(2024, 2, 29))
    assert not is_today(date(2024, 2, 28), today=date(2024, 2, 29))
    assert is_today(date.today())

def test_labels():
    assert weekday_names()[0] == "Mon"
    assert len(weekday_names()) == 7
    assert month_year_display(2024, 1) == "January 2024"

# ---------- build_month ----------
def test_build_month_cells():
    events = [ev("a", "2024-02-29"), ev("b", "2024-03-01"), ev("c", "2023-01-01")]
    cells = build_month(2024, 2, events, today=date(2024, 2, 29))
    assert len(cells) == 42
    by_day = {c.day: c for c in cells}
    leap = by_day[date(2024, 2, 29)]
    assert leap.is_today and leap.is_current_month
    assert [e.id for e in leap.events] == ["a"]
    march = by_day[date(2024, 3, 1)]
    assert not march.is_current_month
    assert [e.id for e in march.events] == ["b"]
    assert sum(len(c.events) for c in cells) == 2
