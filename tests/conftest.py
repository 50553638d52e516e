"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from docatlas.api.dependencies import get_llm_tagger
from docatlas.core.database import Base, get_db
from docatlas.db.models import Document
from docatlas.main import app
from docatlas.services.llm_tagging_service import LLMTaggingService

# In-memory SQLite shared by every session of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _configure_sqlite(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself so SAVEPOINT works with pysqlite
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine, "begin")
def _begin_sqlite(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db) -> Generator:
    """Create a test client with database override and no external tagger."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_tagger] = lambda: LLMTaggingService(api_key="")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_document(db):
    """Factory for committed documents with increasing upload times."""
    base_time = datetime(2025, 9, 10, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(filename: str = "document.pdf", uploaded_at: datetime = None, **kwargs) -> Document:
        counter["n"] += 1
        document = Document(
            filename=filename,
            uploaded_at=uploaded_at or base_time + timedelta(minutes=counter["n"]),
            **kwargs,
        )
        db.add(document)
        db.commit()
        db.refresh(document)
        return document

    return _make


class FakeCompletions:
    """Stands in for client.chat.completions."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_llm_client():
    """Build an OpenAI-like client returning a canned reply."""

    def _build(content=None, error=None):
        completions = FakeCompletions(content=content, error=error)
        return SimpleNamespace(chat=SimpleNamespace(completions=completions))

    return _build
