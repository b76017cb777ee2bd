# release_calendar/scheduler.py
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional
import logging

from release_calendar.dates import (
    DateInput, ONE_DAY, ParseError, add_days, add_months, end_of_day,
    format_date, parse_date, start_of_day,
)
from release_calendar.models import CalendarEvent, Series

logger = logging.getLogger(__name__)

@dataclass
class WindowConfig:
    """Default window around "now" used when callers pass no explicit bounds."""
    months_back: int = 6
    months_forward: int = 3

def event_id(series_id: str, episode_number: int, day: datetime) -> str:
    return f"{series_id}-ep{episode_number}-{format_date(day)}"

def generate_events(series: Series, window_start: DateInput, window_end: DateInput,
                    max_events: Optional[int] = None) -> List[CalendarEvent]:
    """
    Generate the releases of one series that fall inside [window_start, window_end].
    Window bounds are compared by calendar day. Errors for this series are
    logged and produce an empty list instead of propagating.
    """
    events: List[CalendarEvent] = []
    try:
        interval = series.release_interval
        if interval < 1:
            logger.warning("Series %s has release_interval=%s; skipping", series.id, interval)
            return events

        first_release = parse_date(series.start_date)
        start = start_of_day(parse_date(window_start))
        end = end_of_day(parse_date(window_end))

        current = first_release
        episode = series.episode_start
        if first_release < start:
            days_passed = (start - first_release) // ONE_DAY
            episodes_passed = days_passed // interval
            current = add_days(first_release, episodes_passed * interval)
            episode = series.episode_start + episodes_passed
            # flooring can leave us one release short of the window
            if current < start:
                current = add_days(current, interval)
                episode += 1

        while current <= end:
            if max_events is not None and len(events) >= max_events:
                break
            if series.max_episodes is not None and episode > series.max_episodes:
                break
            events.append(CalendarEvent(
                id=event_id(series.id, episode, current),
                series_id=series.id,
                date=format_date(current),
                episode_number=episode,
                season=series.season,
                title=series.title,
                source_url=series.source_url,
            ))
            episode += 1
            current = add_days(current, interval)
    except Exception:
        logger.exception("Error generating events for series %s", series.id)
        return []
    return events

def _sort_key(e: CalendarEvent):
    return (e.date, (e.title or e.series_id).casefold())

def default_window_start(series_list: Iterable[Series], now: datetime,
                         config: WindowConfig) -> datetime:
    """
    Earliest series start, but never further back than config.months_back
    before now. Series starting in the future do not move the window past now.
    """
    earliest = now
    for s in series_list:
        try:
            started = parse_date(s.start_date)
        except ParseError:
            logger.warning("Series %s has unreadable start_date %r", s.id, s.start_date)
            continue
        if started < earliest:
            earliest = started
    floor = add_months(now, -config.months_back)
    return floor if earliest < floor else earliest

def get_all_events(series_list: List[Series], window_start: Optional[DateInput] = None,
                   window_end: Optional[DateInput] = None, config: Optional[WindowConfig] = None,
                   now: Optional[datetime] = None) -> List[CalendarEvent]:
    """Events of every series inside the window, ordered by date then title."""
    config = config or WindowConfig()
    now = now or datetime.now()
    start = parse_date(window_start) if window_start is not None else default_window_start(series_list, now, config)
    end = parse_date(window_end) if window_end is not None else add_months(now, config.months_forward)

    all_events: List[CalendarEvent] = []
    for s in series_list:
        all_events.extend(generate_events(s, start, end))
    all_events.sort(key=_sort_key)
    logger.debug("Generated %d events for %d series between %s and %s",
                 len(all_events), len(series_list), format_date(start), format_date(end))
    return all_events
