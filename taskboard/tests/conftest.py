"""Shared fixtures: an in-memory database, a test client and two users."""

import os

# Must be set before the app module reads its settings.
os.environ.setdefault("TASKBOARD_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from taskboard.crud import TaskStore
from taskboard.db.session import get_session
from taskboard.main import app
from taskboard.models import Task
from taskboard.services.session import create_access_token, register_user


@pytest.fixture
def engine():
    """One in-memory SQLite database shared by every connection in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """Test client whose requests share the test's database session."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def store(session):
    return TaskStore(session)


@pytest.fixture
def alice(session):
    return register_user(session, "alice", "password123")


@pytest.fixture
def bob(session):
    return register_user(session, "bob", "password456")


@pytest.fixture
def alice_headers(alice):
    return {"Authorization": f"Bearer {create_access_token(alice.id)}"}


@pytest.fixture
def bob_headers(bob):
    return {"Authorization": f"Bearer {create_access_token(bob.id)}"}


@pytest.fixture
def abc_tasks(store, alice):
    """Alice's tasks A, B, C at orders 0, 1, 2."""
    return [store.add_task(alice.id, title) for title in ("A", "B", "C")]


@pytest.fixture
def failing_task_update(engine):
    """Fail a flush only after its task UPDATE statements reached the database.

    Yields the list of executed SQL statements so tests can check the rows
    really were written inside the transaction before it was rolled back.
    """
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    def fail(mapper, connection, target):
        raise OperationalError("UPDATE tasks", {}, Exception("disk I/O error"))

    event.listen(engine, "before_cursor_execute", record)
    event.listen(Task, "after_update", fail)
    yield statements
    event.remove(Task, "after_update", fail)
    event.remove(engine, "before_cursor_execute", record)
