"""
Pytest configuration.

Every test gets its own SQLite file database and a frozen clock. API tests
go through FastAPI's TestClient with get_db and get_clock overridden.
"""

import os

# Must be set before any arena import reads the configuration
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from arena.clock import SystemClock, get_clock
from arena.database import Base, build_engine, get_db
from arena.main import app
from arena.models import Court, Membership, MembershipTier, User


class FrozenClock(SystemClock):
    """Clock that only moves when told to"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 8, 0, 0)):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'arena_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = iter(range(1, 1000))

    def _make_user(name: str = "Player", role: str = "user") -> User:
        user = User(email=f"user{next(counter)}@example.com", name=name, role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def give_membership(db):
    def _give_membership(user: User, tier_name: str) -> Membership:
        tier = db.query(MembershipTier).filter(MembershipTier.name == tier_name).first()
        if not tier:
            tier = MembershipTier(name=tier_name, price=0, duration_days=30)
            db.add(tier)
            db.flush()
        membership = Membership(user_id=user.id, tier_id=tier.id, status="active")
        db.add(membership)
        db.commit()
        return membership

    return _give_membership


@pytest.fixture
def user(make_user):
    return make_user("Player One")


@pytest.fixture
def other_user(make_user):
    return make_user("Player Two")


@pytest.fixture
def admin(make_user):
    return make_user("Arena Admin", role="admin")


@pytest.fixture
def court(db):
    court = Court(name="Court 1", status="open")
    db.add(court)
    db.commit()
    db.refresh(court)
    return court