"""
Configuration for pytest tests.
"""

import os
import tempfile

# Keep the default database files out of the working tree; must run before
# transcript_app.config is imported.
_test_dir = tempfile.mkdtemp(prefix="transcript_app_test_")
os.environ.setdefault("DATA_DIR", _test_dir)
os.environ.setdefault("LOG_DIR", os.path.join(_test_dir, "logs"))
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("YOUTUBE_RETRY_DELAY", "0")

import pytest
import requests
from unittest.mock import MagicMock

from transcript_app.cache.local_cache import LocalStorage, LocalStorageCache
from transcript_app.cache.store import CacheStore

START_MS = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_response(body=None, status_code=200, content_type="application/json; charset=utf-8"):
    """Build a stand-in for a requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = {"content-type": content_type} if content_type else {}
    if isinstance(body, str):
        response.json.side_effect = ValueError("not JSON")
        response.text = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def clock():
    """A fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def cache_db_url(tmp_path):
    """SQLite URL of a fresh client cache database."""
    return f"sqlite:///{tmp_path / 'client_cache.db'}"


@pytest.fixture
def cache_store(cache_db_url, clock):
    store = CacheStore(cache_db_url, clock=clock)
    yield store
    store.close()


@pytest.fixture
def local_storage(cache_db_url):
    storage = LocalStorage(cache_db_url)
    yield storage
    storage.close()


@pytest.fixture
def local_cache(local_storage, clock):
    return LocalStorageCache(local_storage, clock=clock)


@pytest.fixture
def http_session():
    """A mocked requests.Session; configure ``request`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sample_video_info():
    return {
        "title": "Test Video",
        "author": "Test Author",
        "lengthSeconds": 212,
        "viewCount": 1500,
        "uploadDate": "2024-01-15",
        "description": "A video used in tests",
        "thumbnails": [{"url": "https://i.ytimg.com/vi/abc12345678/hqdefault.jpg"}],
        "videoId": "abc12345678",
    }


@pytest.fixture
def sample_transcript():
    return [
        {"text": "Hello and welcome.", "offset": 0, "duration": 1800},
        {"text": "Today we talk about caching.", "offset": 1800, "duration": 2500},
        {"text": "Thanks for watching!", "offset": 4300, "duration": 1200},
    ]
