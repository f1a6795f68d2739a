import asyncio
import io
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from earbug_gchat.api.main import create_app
from earbug_gchat.domains.summary.decoder import encode
from earbug_gchat.domains.summary.errors import DeliveryError, UpstreamFetchError
from earbug_gchat.domains.summary.models import PlaybackEvent
from earbug_gchat.domains.summary.pipeline import Services


NOW = datetime(2024, 3, 2, 0, 0, 0, tzinfo=timezone.utc)


class FakeStore:
    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.opened = []

    def open(self, key):
        self.opened.append(key)
        if key not in self.objects:
            raise UpstreamFetchError(f"no object {key}")
        return io.BytesIO(self.objects[key])


class FakeNotifier:
    def __init__(self, error=None, delay=0.0):
        self.sent = []
        self.error = error
        self.delay = delay

    async def send(self, text):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.sent.append(text)


@pytest.fixture
def sample_log():
    return {
        "2024-03-01T10:00:00Z": PlaybackEvent(track_id="A"),
        "2024-02-28T10:00:00Z": PlaybackEvent(track_id="A"),
        "2024-03-01T11:00:00Z": PlaybackEvent(track_id="B"),
    }


@pytest.fixture
def store(sample_log):
    return FakeStore({"alice.pb.zstd": encode(sample_log)})


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def services(store, notifier):
    return Services(store=store, notifier=notifier, timeout=5.0, clock=lambda: NOW)


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as c:
        yield c


@pytest.fixture
def failing_notifier():
    return FakeNotifier(error=DeliveryError("webhook responded 500"))
