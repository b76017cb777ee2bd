# release_calendar/repo.py
import sqlite3
from dataclasses import asdict
from typing import List, Set, Tuple
from release_calendar.models import Series, parse_series_rows
from release_calendar.watched import set_watched
import os
import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS series (
    id TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    title TEXT,
    source_url TEXT NOT NULL,
    season INTEGER NOT NULL,
    episode_start INTEGER NOT NULL,
    max_episodes INTEGER,
    release_interval INTEGER NOT NULL,
    start_date TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS watched_events (
    event_id TEXT PRIMARY KEY
);
"""

SERIES_COLUMNS = ("id", "title", "source_url", "season", "episode_start", "max_episodes",
                  "release_interval", "start_date", "created_at")

# --- Exceptions ---
class RepoError(Exception):
    pass

def _rows_to_series(rows) -> List[Series]:
    series, rejected = parse_series_rows([dict(r) for r in rows])
    for idx, reason in rejected:
        logger.warning("Skipping stored series row %s: %s", idx, reason)
    return series

# --- SQLite repo ---
class SqliteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path
        folder = os.path.dirname(db_path)
        if folder:
            os.makedirs(folder, exist_ok=True)

    @contextmanager
    def conn(self):
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        try:
            yield con
            con.commit()
        except sqlite3.Error as e:
            raise RepoError(str(e)) from e
        finally:
            con.close()

    def init_schema(self) -> None:
        with self.conn() as c:
            c.executescript(SCHEMA)
        logger.debug("Schema ready at %s", self.db_path)

    def load(self) -> Tuple[List[Series], Set[str]]:
        with self.conn() as c:
            rows = c.execute("SELECT * FROM series ORDER BY position").fetchall()
            watched = {r["event_id"] for r in c.execute("SELECT event_id FROM watched_events")}
        return _rows_to_series(rows), watched

    def save(self, series: List[Series]) -> None:
        """Replace the stored series list (last write wins)."""
        cols = ", ".join(("position",) + SERIES_COLUMNS)
        marks = ", ".join("?" for _ in range(len(SERIES_COLUMNS) + 1))
        with self.conn() as c:
            c.execute("DELETE FROM series")
            for pos, s in enumerate(series):
                data = asdict(s)
                c.execute(f"INSERT INTO series ({cols}) VALUES ({marks})",
                          (pos,) + tuple(data[k] for k in SERIES_COLUMNS))

    def set_watched(self, event_id: str, watched: bool) -> None:
        with self.conn() as c:
            if watched:
                c.execute("INSERT OR IGNORE INTO watched_events (event_id) VALUES (?)", (event_id,))
            else:
                c.execute("DELETE FROM watched_events WHERE event_id = ?", (event_id,))

# --- In-memory repo (simple, used for unit tests) ---
class InMemoryRepo:
    def __init__(self, series: List[Series] = None, watched: Set[str] = None):
        self._series: List[Series] = list(series or [])
        self._watched: Set[str] = set(watched or ())

    def init_schema(self) -> None:
        pass

    def load(self) -> Tuple[List[Series], Set[str]]:
        # hand out copies so callers cannot mutate the store behind save()
        return [Series(**asdict(s)) for s in self._series], set(self._watched)

    def save(self, series: List[Series]) -> None:
        self._series = [Series(**asdict(s)) for s in series]

    def set_watched(self, event_id: str, watched: bool) -> None:
        set_watched(self._watched, event_id, watched)
