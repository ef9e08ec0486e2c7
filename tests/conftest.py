import os

# must be set before anything under app/ reads its config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTH_VERIFY_MODE"] = "header"
os.environ["AUTH_JWT_SECRET"] = "test-secret"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.core.db import Base, SessionLocal, engine
from app.core.init_db import init_db
from app.models.partner_preference import PartnerPreference
from app.models.profile import Profile

init_db()


def dob_for_age(age: int, today: date | None = None) -> date:
    # Jan 1 birthdays have always passed, so the age is exact
    today = today or date.today()
    return date(today.year - age, 1, 1)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_db():
    # independent session: only sees what has been committed
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def broken_dispatch(*args, **kwargs):
    raise RuntimeError("notification dispatch failed")


@pytest.fixture
def make_profile(db):
    def _make(user_id: str, gender: str = "female", age: int = 28, **fields) -> Profile:
        values = {
            "first_name": user_id.capitalize(),
            "last_name": "Test",
            "gender": gender,
            "date_of_birth": dob_for_age(age),
            "height": 165.0,
            "religion": "Hindu",
            "caste": "Brahmin",
            "education": "B.Tech",
            "profession": "Engineer",
            "city": "Pune",
            "state": "Maharashtra",
        }
        values.update(fields)
        profile = Profile(user_id=user_id, **values)
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_preference(db):
    def _make(user_id: str, **fields) -> PartnerPreference:
        pref = PartnerPreference(user_id=user_id, **fields)
        db.add(pref)
        db.commit()
        return pref

    return _make


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as c:
        yield c


def as_user(user_id: str) -> dict:
    return {"X-User-Id": user_id}
