import sys
from pathlib import Path

import pytest


# Ensure tests can import project packages regardless of how pytest is invoked.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


class FakeResponse:
    def __init__(self, status_code=200, text="", payload=None):
        self.status_code = status_code
        self.text = text
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class RecordingFetcher:
    """Stands in for CatalogClient.fetch_text and remembers every request."""

    def __init__(self, page="", error=None):
        self.page = page
        self.error = error
        self.calls = []

    def fetch_text(self, url, headers=None):
        self.calls.append({"url": url, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.page


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def recording_fetcher():
    return RecordingFetcher


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "playlists.json"
