# release_calendar/watched.py
from dataclasses import replace
from typing import AbstractSet, Iterable, List, MutableSet

from release_calendar.models import CalendarEvent

def apply_watched(events: Iterable[CalendarEvent], watched_ids: AbstractSet[str]) -> List[CalendarEvent]:
    """Return copies of events with `watched` taken from the watched-id set."""
    return [replace(e, watched=e.id in watched_ids) for e in events]

def set_watched(watched_ids: MutableSet[str], event_id: str, watched: bool) -> None:
    """Only positively watched ids are kept; unmarking removes the entry."""
    if watched:
        watched_ids.add(event_id)
    else:
        watched_ids.discard(event_id)
