from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studycore.fsrs.memory_state import MemoryState
from studycore.fsrs.models import Base
from studycore.fsrs.scheduler import Scheduler


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def make_state(now):
    """Build a MemoryState relative to `now` in days."""
    def _make(stability=5.0, difficulty=5.0, last_review_days_ago=1.0, due_in_hours=72.0):
        last_review = (
            now - timedelta(days=last_review_days_ago)
            if last_review_days_ago is not None else None
        )
        return MemoryState(
            stability=stability,
            difficulty=difficulty,
            last_review=last_review,
            next_review=now + timedelta(hours=due_in_hours),
        )
    return _make


@pytest.fixture
def db_session():
    """In-memory SQLite session with the FSRS schema."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
