import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from requests_mock import Mocker

SAMPLES = Path(__file__).parent / 'samples'

# localtime_epoch of samples/response.json
SAMPLE_NOW = datetime.fromtimestamp(1700000000, tz=timezone.utc)


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


@pytest.fixture
def sample_response():
    with open(SAMPLES / 'response.json', 'r', encoding='utf-8') as f:
        return json.load(f)


@pytest.fixture
def sample_now():
    return lambda: SAMPLE_NOW


class FakeClock:
    """Settable replacement for the cache's clock."""

    def __init__(self, now=SAMPLE_NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
