from release_calendar.models import CalendarEvent
from release_calendar.watched import apply_watched, set_watched

def make_events():
    return [
        CalendarEvent(id="s-ep1-2024-01-01", series_id="s", date="2024-01-01", episode_number=1, season=1),
        CalendarEvent(id="s-ep2-2024-01-08", series_id="s", date="2024-01-08", episode_number=2, season=1),
    ]

def test_apply_watched_sets_flag_from_set():
    out = apply_watched(make_events(), {"s-ep2-2024-01-08"})
    assert [e.watched for e in out] == [False, True]

def test_apply_watched_does_not_mutate_input():
    events = make_events()
    apply_watched(events, {"s-ep1-2024-01-01"})
    assert all(e.watched is None for e in events)

def test_apply_watched_is_idempotent():
    ids = {"s-ep1-2024-01-01"}
    once = apply_watched(make_events(), ids)
    assert apply_watched(once, ids) == once

def test_apply_watched_overrides_stale_flag():
    once = apply_watched(make_events(), {"s-ep1-2024-01-01"})
    again = apply_watched(once, set())
    assert [e.watched for e in again] == [False, False]

def test_set_watched_is_sparse():
    ids = set()
    set_watched(ids, "a", True)
    set_watched(ids, "b", True)
    set_watched(ids, "a", False)
    assert ids == {"b"}
    # unmarking an unknown id is a no-op
    set_watched(ids, "zzz", False)
    assert ids == {"b"}

def test_orphaned_ids_never_match():
    out = apply_watched(make_events(), {"deleted-ep1-2024-01-01"})
    assert not any(e.watched for e in out)
