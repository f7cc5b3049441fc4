from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from dailyriddle.auth import create_token
from dailyriddle.db import init_db
from dailyriddle.deps import get_db, get_now, get_today
from dailyriddle.main import app
from dailyriddle.models import Fact, Profile, Riddle

TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """In-memory SQLite shared across connections for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    """Mutable clock; tests move `clock["today"]` to simulate later days."""
    return {"today": TODAY, "now": NOW}


@pytest.fixture
def client(session, clock):
    def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_today] = lambda: clock["today"]
    app.dependency_overrides[get_now] = lambda: clock["now"]
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(session):
    profile = Profile(name="Kavya", email="kavya@example.com")
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_token(user.id)}"}


@pytest.fixture
def riddle(session):
    rec = Riddle(
        text_en="I speak without a mouth. What am I?",
        text_ta="வாய் இல்லாமல் பேசுவேன். நான் யார்?",
        text_ta_en="Vaai illaamal pesuven. Naan yaar?",
        answer="echo",
        category="nature",
    )
    session.add(rec)
    session.commit()
    session.refresh(rec)
    return rec


@pytest.fixture
def fact(session):
    rec = Fact(category="science", fact_text="Octopuses have three hearts.", source="NatGeo")
    session.add(rec)
    session.commit()
    session.refresh(rec)
    return rec
