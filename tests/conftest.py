# tests/conftest.py

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from studybuddy.api.deps import get_connector
from studybuddy.core.config import Settings
from studybuddy.db.models import Priority, Status, Task
from studybuddy.db.session import init_db
from studybuddy.main import create_app

from .fakes import FakeCalendarClient, FakeConnector, make_session


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        LLM_PROVIDER="ollama",
        OPENAI_API_KEY="",
        GOOGLE_CREDENTIALS_PATH=str(tmp_path / "credentials.json"),
        GOOGLE_TOKEN_PATH=str(tmp_path / "token.json"),
        GOOGLE_CREDENTIALS_CONTENT="",
        GOOGLE_TOKEN_CONTENT="",
        ENVIRONMENT="development",
    )


@pytest.fixture()
def engine():
    """One in-memory SQLite database shared by every connection of a test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    return eng


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def calendar_client() -> FakeCalendarClient:
    return FakeCalendarClient()


@pytest.fixture()
def calendar(calendar_client):
    return make_session(calendar_client)


@pytest.fixture()
def connector(calendar) -> FakeConnector:
    return FakeConnector(calendar)


@pytest.fixture()
def app(settings, engine, connector):
    application = create_app(settings, engine=engine, connector=connector)
    application.dependency_overrides[get_connector] = lambda: connector
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_task(session):
    def _make(**overrides) -> Task:
        fields = dict(
            title="Làm bài tập",
            deadline=datetime(2030, 1, 10, 9, 0),
            priority=Priority.medium,
            estimate_minutes=60,
            status=Status.todo,
        )
        fields.update(overrides)
        task = Task(**fields)
        session.add(task)
        session.commit()
        session.refresh(task)
        return task

    return _make
