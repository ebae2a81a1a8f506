"""Pytest configuration: in-memory database and recording fakes for push and geolocation."""
import os

# must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["VISITS_ADMIN_TOKEN"] = "test-token"
os.environ["GEOLOCATION_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from core.limiter import limiter
from database import engine
from main import app
from services.broadcast import get_broadcaster
from services.geolocation import get_geolocator, EMPTY_LOCATION


class RecordingBroadcaster:
    def __init__(self):
        self.events = []

    async def broadcast(self, event, data):
        self.events.append((event, data))


class FakeGeolocator:
    def __init__(self, location=None):
        self.location = location or dict(EMPTY_LOCATION)
        self.calls = []

    async def locate(self, ip):
        self.calls.append(ip)
        return dict(self.location)


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def geolocator():
    return FakeGeolocator({"latitude": -23.55, "longitude": -46.63, "country": "Brazil", "city": "São Paulo"})


@pytest.fixture
def session():
    with Session(engine) as session:
        yield session


def _client(overrides):
    limiter.reset()
    app.dependency_overrides.update(overrides)
    try:
        # entering the client runs the lifespan, which creates the tables
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
        SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(broadcaster, geolocator):
    yield from _client({
        get_broadcaster: lambda: broadcaster,
        get_geolocator: lambda: geolocator,
    })


@pytest.fixture
def live_client(geolocator):
    """Client wired to the real connection manager, for push-channel tests."""
    yield from _client({get_geolocator: lambda: geolocator})
