# release_calendar/service.py
from typing import Any, Dict, List, Optional, Tuple
from datetime import MAXYEAR, MINYEAR, date, datetime
import logging
import uuid

from release_calendar.dates import ParseError, format_date, parse_date
from release_calendar.grid import build_month, get_month_days
from release_calendar.models import (
    CalendarCell, CalendarEvent, Series, now_iso, parse_series_rows, series_to_dict,
)
from release_calendar.scheduler import WindowConfig, get_all_events
from release_calendar.url_parser import is_valid_url, parse_source_url
from release_calendar.watched import apply_watched

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

# Exceptions
class ValidationError(Exception):
    """Raised when input or business validation fails."""
    pass

class NotFoundError(Exception):
    """Raised when an entity is not found."""
    pass

def _require_positive(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return value

class CalendarService:
    """
    Use cases of the release calendar.
    The service expects a repository object exposing load/save/set_watched
    (SqliteRepo or InMemoryRepo from release_calendar.repo). Every mutation
    is a load, change, save sequence.
    """

    def __init__(self, repo, window: Optional[WindowConfig] = None):
        """
        Initialize service with a repository instance (injected).
        """
        self.repo = repo
        self.window = window or WindowConfig()
        logger.debug("CalendarService initialized with repo %s", type(repo).__name__)

    # ---- Series ----
    def _validate(self, s: Series) -> None:
        if not is_valid_url(s.source_url):
            raise ValidationError("source_url must be an http(s) URL")
        _require_positive("season", s.season)
        _require_positive("episode_start", s.episode_start)
        _require_positive("release_interval", s.release_interval)
        if s.max_episodes is not None:
            _require_positive("max_episodes", s.max_episodes)
        try:
            s.start_date = format_date(parse_date(s.start_date))
        except ParseError as e:
            raise ValidationError(str(e)) from e

    def list_series(self) -> List[Series]:
        series, _ = self.repo.load()
        return series

    def get_series(self, series_id: str) -> Series:
        """Get a series by id or raise NotFoundError."""
        for s in self.list_series():
            if s.id == series_id:
                return s
        logger.debug("get_series: series %s not found", series_id)
        raise NotFoundError("series not found")

    def add_series(self, source_url: str, start_date, season: Optional[int] = None,
                   episode_start: Optional[int] = None, release_interval: int = 7,
                   max_episodes: Optional[int] = None, title: Optional[str] = None) -> Series:
        """
        Add a series. Title, season and start episode fall back to the hints
        found in the source URL, then to 1.
        """
        source_url = (source_url or "").strip()
        hint = parse_source_url(source_url)
        s = Series(
            id=uuid.uuid4().hex,
            source_url=source_url,
            start_date=start_date,
            season=season if season is not None else (hint.season or 1),
            episode_start=episode_start if episode_start is not None else (hint.episode or 1),
            release_interval=release_interval,
            title=(title or "").strip() or hint.title,
            max_episodes=max_episodes,
        )
        try:
            self._validate(s)
        except ValidationError as e:
            logger.warning("add_series rejected: %s", e)
            raise
        series, _ = self.repo.load()
        series.append(s)
        self.repo.save(series)
        logger.info("Added series id=%s title=%s", s.id, s.title)
        return s

    def update_series(self, series_id: str, **changes) -> Series:
        """Apply field changes to a series; unknown fields are a ValidationError."""
        allowed = {"title", "source_url", "season", "episode_start", "max_episodes",
                   "release_interval", "start_date"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"unknown fields: {', '.join(sorted(unknown))}")
        series, _ = self.repo.load()
        for i, s in enumerate(series):
            if s.id == series_id:
                break
        else:
            raise NotFoundError("series not found")
        for k, v in changes.items():
            setattr(s, k, v.strip() if isinstance(v, str) else v)
        if s.title == "":
            s.title = None
        try:
            self._validate(s)
        except ValidationError as e:
            logger.warning("update_series rejected for %s: %s", series_id, e)
            raise
        series[i] = s
        self.repo.save(series)
        logger.info("Updated series id=%s", series_id)
        return s

    def delete_series(self, series_id: str) -> None:
        """Delete a series. Watched ids of its events are left in place."""
        series, _ = self.repo.load()
        remaining = [s for s in series if s.id != series_id]
        if len(remaining) == len(series):
            raise NotFoundError("series not found")
        self.repo.save(remaining)
        logger.info("Deleted series id=%s", series_id)

    # ---- Events ----
    def events(self, window_start=None, window_end=None, now: Optional[datetime] = None) -> List[CalendarEvent]:
        """All events in the window with the watched flag applied."""
        series, watched = self.repo.load()
        generated = get_all_events(series, window_start, window_end, config=self.window, now=now)
        return apply_watched(generated, watched)

    def month_view(self, year: int, month: int, today: Optional[date] = None) -> List[CalendarCell]:
        """Grid cells of one month; events are generated for the visible 42 days."""
        if not 1 <= month <= 12:
            raise ValidationError("month must be 1-12")
        if not MINYEAR < year < MAXYEAR:
            raise ValidationError("year out of range")
        days = get_month_days(year, month)
        return build_month(year, month, self.events(days[0], days[-1]), today=today)

    def set_event_watched(self, event_id: str, watched: bool) -> None:
        if not event_id:
            raise ValidationError("event id required")
        self.repo.set_watched(event_id, watched)
        logger.info("Event %s watched=%s", event_id, watched)

    # ---- Import / Export ----
    def export_data(self) -> Dict[str, Any]:
        """Versioned blob with every series and the watched-id map."""
        series, watched = self.repo.load()
        out = {
            "version": EXPORT_VERSION,
            "series": [series_to_dict(s) for s in series],
            "watchedEvents": {eid: True for eid in sorted(watched)},
            "lastUpdated": now_iso(),
        }
        logger.info("Exported %d series and %d watched events", len(series), len(watched))
        return out

    def import_data(self, payload: Any) -> Tuple[int, List[str]]:
        """
        Merge an exported blob into the store. Series with an id already
        present replace the stored one. Accepts "series" or the older
        "animes" key. Returns (imported_count, errors).
        """
        if not isinstance(payload, dict):
            raise ValidationError("import payload must be an object")
        rows = payload.get("series", payload.get("animes", []))
        parsed, rejected = parse_series_rows(rows)
        errors = [f"row {i+1}: {reason}" for i, reason in rejected]

        accepted: List[Series] = []
        for s in parsed:
            try:
                self._validate(s)
                accepted.append(s)
            except ValidationError as e:
                errors.append(f"series {s.id}: {e}")

        series, _ = self.repo.load()
        by_id = {s.id: i for i, s in enumerate(series)}
        for s in accepted:
            if s.id in by_id:
                series[by_id[s.id]] = s
            else:
                by_id[s.id] = len(series)
                series.append(s)
        self.repo.save(series)

        watched = payload.get("watchedEvents") or {}
        if isinstance(watched, dict):
            for eid, flag in watched.items():
                if flag:
                    self.repo.set_watched(eid, True)
        else:
            errors.append("watchedEvents must be an object")
        for err in errors:
            logger.warning("import: %s", err)
        logger.info("Import completed: series=%d errors=%d", len(accepted), len(errors))
        return len(accepted), errors
