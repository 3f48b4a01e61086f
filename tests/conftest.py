import os

# Point the app at a throwaway in-memory database before anything imports settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from campaign_manager.auth.auth_utils import get_current_user
from campaign_manager.core.cache import TTLCache
from campaign_manager.database.db import Base, SessionLocal, engine
from campaign_manager.database.models import User, UserRole
from campaign_manager.main import app
from campaign_manager.services.campaign_service import CampaignService


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNow:
    """Wall clock for documents: each call is one second after the previous one."""

    def __init__(self):
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=60, clock=clock)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def service(db, cache):
    return CampaignService(db, cache, ttl=60, now=FakeNow())


@pytest.fixture
def current_user():
    return User(id="0" * 32, name="Test Admin", email="admin@example.com", role=UserRole.ADMIN.value)


@pytest.fixture
def client(db, current_user):
    app.state.cache.clear()
    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.cache.clear()
