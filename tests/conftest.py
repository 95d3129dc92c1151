import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

FIXTURES = Path(__file__).parent / "fixtures"
BASE_URL = "http://localhost:6397"

# Live responses served for the endpoints of fixtures/swagger-schema.json
SAMPLES = {
    "/navigation/state": (200, json.dumps({"state": "garage", "loading": False}).encode()),
    "/rest/race/status": (200, json.dumps({"phase": 5, "timeRemaining": 120.5}).encode()),
    "/rest/race-status": (200, b"running"),
    "/rest/watch/broken": (500, b"internal error"),
    "/rest/watch/sessionInfo": (200, json.dumps({
        "trackName": "Le Mans",
        "session": "RACE1",
        "numberOfVehicles": 3,
        "playerID": 1,
        "lapDistance": 13626.0,
        "weather": {"ambientTemp": 21.0, "rain": 0.25},
    }).encode()),
    "/rest/watch/standings": (200, json.dumps([
        {"driverName": "A. Driver", "position": 1, "lapsCompleted": 10, "bestLapTime": 211.4},
        {"driverName": "B. Driver", "position": 2, "lapsCompleted": 10, "bestLapTime": 212.9},
    ]).encode()),
}


def make_response(status_code: int, content: bytes) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.text = content.decode("utf-8", errors="replace")
    return resp


def make_session(samples: dict[str, tuple[int, bytes]], base_url: str = BASE_URL) -> MagicMock:
    """A requests.Session stand-in serving ``samples`` keyed by path."""

    def request(method, url, **kwargs):
        path = url.removeprefix(base_url)
        if path not in samples:
            raise requests.ConnectionError(f"connection refused: {url}")
        return make_response(*samples[path])

    session = MagicMock()
    session.request.side_effect = request
    return session


@pytest.fixture
def sample_session():
    return make_session(SAMPLES)
