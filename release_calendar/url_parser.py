# release_calendar/url_parser.py
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse
import re

_PREFIX_RE = re.compile(r"^(https?://)?(www\.)?", re.IGNORECASE)
_STREAM_RE = re.compile(
    r"aniworld\.to/anime/stream/([^/]+)(?:/staffel-(\d+))?(?:/episode-(\d+))?",
    re.IGNORECASE,
)

@dataclass
class SourceHint:
    title: Optional[str] = None
    season: Optional[int] = None
    episode: Optional[int] = None

def _positive(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    n = int(raw)
    return n if n > 0 else None

def parse_source_url(url: str) -> SourceHint:
    """
    Extract title/season/episode hints from a stream link such as
    aniworld.to/anime/stream/one-piece/staffel-1/episode-1.
    Unknown links give an empty hint.
    """
    if not url:
        return SourceHint()
    m = _STREAM_RE.search(_PREFIX_RE.sub("", url.strip()))
    if not m:
        return SourceHint()
    title, season, episode = m.groups()
    return SourceHint(title=title or None, season=_positive(season), episode=_positive(episode))

def is_valid_url(url: str) -> bool:
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
