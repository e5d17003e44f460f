"""Pytest configuration and shared fixtures."""
import json
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import Settings, reset_settings
from shared.models.entities import Base, Club, Student


class FakeClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def db_session():
    """
    Create a test database session with in-memory SQLite.

    A single shared connection (StaticPool) lets FastAPI's worker threads see
    the same in-memory database as the test body.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_settings():
    """Settings with deterministic values, independent of the environment."""
    return Settings(
        super_admin_email="admin@mytaek.com",
        super_admin_password="dojo-secret",
        impersonation_ttl_minutes=30,
        operator_session_ttl_hours=8,
        trust_promotion_streak=3,
        trust_demotion_rejections=2,
    )


@pytest.fixture
def env_settings(monkeypatch):
    """Point the global settings at test credentials for code that calls get_settings()."""
    monkeypatch.setenv("SUPER_ADMIN_EMAIL", "admin@mytaek.com")
    monkeypatch.setenv("SUPER_ADMIN_PASSWORD", "dojo-secret")
    monkeypatch.setenv("TRUST_PROMOTION_STREAK", "3")
    monkeypatch.setenv("TRUST_DEMOTION_REJECTIONS", "2")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_club(db_session):
    club = Club(
        id="club-1",
        name="Tiger Dojang",
        owner_email="owner@tigerdojang.com",
        owner_name="Master Kim",
        wizard_data=json.dumps({"belts": ["White", "Yellow", "Green"], "students": []}),
        coach_bonus_enabled=True,
        homework_enabled=True,
    )
    db_session.add(club)
    db_session.commit()
    return club


@pytest.fixture
def sample_student(db_session, sample_club):
    student = Student(
        id="student-1",
        club_id=sample_club.id,
        name="Mina Park",
        belt="Yellow",
    )
    db_session.add(student)
    db_session.commit()
    return student
