# release_calendar/models.py
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from release_calendar.dates import ParseError, format_date, parse_date

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

class SeriesParseError(ValueError):
    """Raised when a stored or imported series row is malformed."""
    pass

@dataclass
class Series:
    id: str
    source_url: str
    start_date: str  # YYYY-MM-DD, first release
    season: int = 1
    episode_start: int = 1
    release_interval: int = 7  # days between episodes
    title: Optional[str] = None
    max_episodes: Optional[int] = None  # None -> ongoing
    created_at: str = field(default_factory=now_iso)

    @property
    def display_title(self) -> str:
        return self.title or self.id

@dataclass
class CalendarEvent:
    id: str
    series_id: str
    date: str  # YYYY-MM-DD
    episode_number: int
    season: int
    title: Optional[str] = None
    source_url: Optional[str] = None
    watched: Optional[bool] = None  # only set by the watched overlay

@dataclass
class CalendarCell:
    day: date
    events: List[CalendarEvent] = field(default_factory=list)
    is_today: bool = False
    is_current_month: bool = False


# Stored rows may use either our field names or the camelCase export format.
_ALIASES = {
    "source_url": ("source_url", "sourceUrl"),
    "start_date": ("start_date", "startDate"),
    "episode_start": ("episode_start", "episodeStart"),
    "release_interval": ("release_interval", "releaseInterval"),
    "max_episodes": ("max_episodes", "maxEpisodes"),
    "created_at": ("created_at", "createdAt"),
}

def _get(raw: Dict[str, Any], name: str, default=None):
    for key in _ALIASES.get(name, (name,)):
        if key in raw:
            return raw[key]
    return default

def _positive_int(raw: Dict[str, Any], name: str, default=None, required: bool = True) -> Optional[int]:
    value = _get(raw, name, default)
    if value is None and not required:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SeriesParseError(f"{name} must be a positive integer")
    return value

def series_from_dict(raw: Any) -> Series:
    """Build a Series from a stored/imported mapping or raise SeriesParseError."""
    if not isinstance(raw, dict):
        raise SeriesParseError("series entry must be an object")
    sid = raw.get("id")
    if not isinstance(sid, str) or not sid:
        raise SeriesParseError("id must be a non-empty string")
    source_url = _get(raw, "source_url")
    if not isinstance(source_url, str) or not source_url:
        raise SeriesParseError("source_url must be a non-empty string")
    try:
        start = format_date(parse_date(_get(raw, "start_date")))
    except ParseError as e:
        raise SeriesParseError(f"start_date invalid: {e}") from e
    title = raw.get("title")
    if title is not None and not isinstance(title, str):
        raise SeriesParseError("title must be a string")
    created_at = _get(raw, "created_at")
    if isinstance(created_at, (date, datetime)):
        created_at = created_at.isoformat()
    return Series(
        id=sid,
        source_url=source_url,
        start_date=start,
        season=_positive_int(raw, "season", 1),
        episode_start=_positive_int(raw, "episode_start", 1),
        release_interval=_positive_int(raw, "release_interval", 7),
        title=title or None,
        max_episodes=_positive_int(raw, "max_episodes", required=False),
        created_at=created_at if isinstance(created_at, str) and created_at else now_iso(),
    )

def parse_series_rows(rows: Any) -> Tuple[List[Series], List[Tuple[int, str]]]:
    """
    Parse a list of raw series rows.
    Returns (accepted, rejected) where rejected holds (row index, reason) pairs.
    """
    if not isinstance(rows, list):
        return [], [(0, "series must be a list")]
    accepted: List[Series] = []
    rejected: List[Tuple[int, str]] = []
    for i, raw in enumerate(rows):
        try:
            accepted.append(series_from_dict(raw))
        except SeriesParseError as e:
            rejected.append((i, str(e)))
    return accepted, rejected

def series_to_dict(s: Series) -> Dict[str, Any]:
    """camelCase export form of a series."""
    return {
        "id": s.id,
        "title": s.title,
        "sourceUrl": s.source_url,
        "season": s.season,
        "episodeStart": s.episode_start,
        "maxEpisodes": s.max_episodes,
        "releaseInterval": s.release_interval,
        "startDate": s.start_date,
        "createdAt": s.created_at,
    }
