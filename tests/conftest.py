"""
Shared fixtures for the redirector test suite.
"""

import json
from datetime import datetime, timezone
from typing import List, Tuple

import pytest

from redirector.core.setting import Settings

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


class FakeGeoIP:
    """GeoIP double returning a fixed location and remembering every IP."""

    def __init__(self, result: Tuple[str, str] = ("DE", "Berlin")):
        self.result = result
        self.calls: List[str] = []
        self.closed = False

    async def lookup(self, ip: str) -> Tuple[str, str]:
        self.calls.append(ip)
        if not ip:
            return "", ""
        return self.result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def fake_geoip():
    return FakeGeoIP()


@pytest.fixture
def visits_path(tmp_path):
    return tmp_path / "visits.jsonl"


@pytest.fixture
def urls_path(tmp_path):
    path = tmp_path / "urls.json"
    path.write_text(json.dumps({
        "gh": "https://github.com",
        "docs": "http://example.com/docs?page=1",
        "evil": "javascript:alert(1)",
    }))
    return path


@pytest.fixture
def settings(urls_path, visits_path):
    return Settings(
        PORT=8080,
        DATA_FILE=str(urls_path),
        VISITS_FILE=str(visits_path),
        GEOIP_ACCOUNT_ID="123456",
        GEOIP_LICENSE_KEY="secret",
        RATE_LIMIT_ENABLED=False,
    )


def read_visits(path) -> List[dict]:
    """Parse a visit log into a list of records."""
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
