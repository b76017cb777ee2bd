import pytest
from release_calendar.url_parser import SourceHint, parse_source_url, is_valid_url

@pytest.mark.parametrize("url, expected", [
    ("https://aniworld.to/anime/stream/one-piece/staffel-1/episode-1", SourceHint("one-piece", 1, 1)),
    ("aniworld.to/anime/stream/one-piece/staffel-2", SourceHint("one-piece", 2, None)),
    ("http://www.aniworld.to/anime/stream/frieren", SourceHint("frieren", None, None)),
    ("https://aniworld.to/anime/stream/x/staffel-0/episode-3", SourceHint("x", None, 3)),
    ("https://example.org/show/42", SourceHint()),
    ("", SourceHint()),
])
def test_parse_source_url(url, expected):
    assert parse_source_url(url) == expected

@pytest.mark.parametrize("url, ok", [
    ("https://example.org/a", True),
    ("http://example.org", True),
    ("ftp://example.org", False),
    ("example.org", False),
    ("", False),
    (None, False),
])
def test_is_valid_url(url, ok):
    assert is_valid_url(url) is ok
