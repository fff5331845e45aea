"""
Shared fixtures: an in-memory SQLite key-value store, a controllable clock
and Session Managers built on top of them.
"""
from datetime import datetime, timedelta, timezone

import pytest

from stockroom.core.config import Settings
from stockroom.core.database import init_db, make_engine, make_session_factory
from stockroom.core.storage import SqlKeyValueStore
from stockroom.services.auth_service import SessionManager


class FakeClock:
    """Callable returning a fixed UTC time that tests move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", SEED_DEMO_USERS=True, LOG_LEVEL="WARNING")


@pytest.fixture
def store(settings):
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)
    yield SqlKeyValueStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def manager(store, settings, clock):
    return SessionManager(store, settings, clock=clock)


@pytest.fixture
def seeded_manager(manager):
    manager.seed_demo_users()
    return manager
