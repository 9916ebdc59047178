import os
import tempfile

# Point the module-level engine and error log somewhere harmless before the
# app modules are imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="medtrack-logs-"))

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, build_engine, get_db
from services import clock

# A Wednesday.
FIXED_NOW = datetime(2025, 3, 12, 9, 30, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment += timedelta(**kwargs)


@pytest.fixture
def frozen_clock(monkeypatch):
    fc = FrozenClock(FIXED_NOW)
    monkeypatch.setattr(clock, "now", fc)
    return fc


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory, frozen_clock):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, frozen_clock):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
