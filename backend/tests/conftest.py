"""Pytest fixtures — file-backed SQLite database per test, isolated sessions."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from points_ledger.database import Base, get_db
from points_ledger.main import app

# Import all models so they register with Base.metadata
from points_ledger.models.employee import Employee, Title
from points_ledger.models.reward import Reward

LOCATION = "store-101"
OTHER_LOCATION = "store-202"


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test.

    File-backed rather than in-memory so that several sessions (one per
    simulated actor) see each other's commits.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}", connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def other_db(session_factory):
    """A second, independent session playing the competing actor in race tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: seed the roster and reward catalog directly through the ORM
# ---------------------------------------------------------------------------
def make_employee(db, name: str = "Team Member", title=Title.team_member,
                  location_id: str = LOCATION, active: bool = True) -> Employee:
    """Insert an employee and return it."""
    employee = Employee(
        location_id=location_id,
        display_name=name,
        title=title.value if isinstance(title, Title) else title,
        active=active,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def make_reward(db, cost: int, name: str = "Free Meal",
                location_id: str = LOCATION, active: bool = True) -> Reward:
    """Insert a catalog reward and return it."""
    reward = Reward(location_id=location_id, reward_name=name, points_cost=cost, active=active)
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


def create_test_employee(client: TestClient, name: str = "Test Employee",
                         title: str = "Team Member", location_id: str = LOCATION) -> dict:
    """Helper — POST /api/employees and return response JSON."""
    resp = client.post("/api/employees/", json={
        "location_id": location_id,
        "display_name": name,
        "title": title,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
