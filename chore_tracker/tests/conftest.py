"""
Shared fixtures: an isolated in-memory database per test, seeded kids and
tasks, and an HTTP client bound to its own app instance.
"""
import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from chore_tracker.app import create_app
from chore_tracker.database import Base, create_session_factory
from chore_tracker.models import Kid, ChoreDefinition, ExtraTask, CompletionRecord
from chore_tracker.constants import DEFAULT_ADMIN_PIN, ADMIN_PIN_HEADER


def create_kid(db, name, current_list="A", points=0, color="#FF6B6B"):
    kid = Kid(name=name, color=color, points=points, current_list=current_list, active=True)
    db.add(kid)
    db.commit()
    db.refresh(kid)
    return kid


def create_chore(db, list_name, chore_name, active=True):
    chore = ChoreDefinition(list_name=list_name, chore_name=chore_name, active=active)
    db.add(chore)
    db.commit()
    db.refresh(chore)
    return chore


def create_extra_task(db, kid_id, task_name, active=True):
    task = ExtraTask(kid_id=kid_id, task_name=task_name, active=active)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def count_completions(db, **filters):
    return db.query(CompletionRecord).filter_by(**filters).count()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def today():
    return date(2024, 1, 1)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def ava(db_session):
    return create_kid(db_session, "Ava", current_list="A")


@pytest.fixture
def ben(db_session):
    return create_kid(db_session, "Ben", current_list="B", color="#4ECDC4")


@pytest.fixture
def chore_lists(db_session):
    """Two chores on list A, one on list B"""
    return {
        "A": [
            create_chore(db_session, "A", "Make bed"),
            create_chore(db_session, "A", "Feed the cat"),
        ],
        "B": [
            create_chore(db_session, "B", "Take out trash"),
        ],
    }


@pytest.fixture
def ava_extras(db_session, ava):
    """Ava's two extra tasks"""
    return [
        create_extra_task(db_session, ava.id, "Read 20 minutes"),
        create_extra_task(db_session, ava.id, "Practice piano"),
    ]


@pytest.fixture
def client(engine):
    app = create_app(engine, enable_scheduler=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {ADMIN_PIN_HEADER: DEFAULT_ADMIN_PIN}
