# /tests/conftest.py

import os

# Settings are read once at import time, so the test environment must be in
# place before anything from the application is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["GOOGLE_API_KEY"] = ""
os.environ["PUBLIC_BASE_URL"] = "https://board.example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teacherboard.config import RetryPolicy
from teacherboard.core.security import create_access_token
from teacherboard.db.base import Base
from teacherboard.db.database import get_db
from teacherboard.main import app
from teacherboard.services.document_store import DocumentStore, SubscriptionHub

TEACHER = {"uid": "teacher-1", "displayName": "김선생", "email": "kim@example.com", "photoURL": None}
OTHER_TEACHER = {"uid": "teacher-2", "displayName": "이선생", "email": "lee@example.com", "photoURL": None}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def hub():
    return SubscriptionHub()


@pytest.fixture
def store(db_session, hub):
    """A store over a fresh in-memory database that never sleeps between retries."""
    return DocumentStore(db_session, hub=hub, retry_policy=RetryPolicy(max_retries=2, retry_delay_ms=0), sleep=lambda _: None)


@pytest.fixture
def client(session_factory, hub):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.subscriptions = hub
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token(TEACHER)}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {create_access_token(OTHER_TEACHER)}"}


@pytest.fixture
def teacher_token():
    return create_access_token(TEACHER)
