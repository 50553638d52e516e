"""Tests for application settings."""
from docatlas.core.config import Settings


def test_database_url_built_from_parts(monkeypatch):
    """Without DATABASE_URL the PostgreSQL URL is assembled."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(POSTGRES_HOST="db", POSTGRES_DB="atlas")
    assert settings.DATABASE_URL == "postgresql+psycopg2://postgres:postgres@db:5432/atlas"


def test_database_url_from_environment(monkeypatch):
    """An explicit DATABASE_URL wins over the POSTGRES_* parts."""
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://app:secret@pg:6432/prod")
    settings = Settings(POSTGRES_HOST="ignored")
    assert settings.DATABASE_URL == "postgresql+psycopg2://app:secret@pg:6432/prod"
