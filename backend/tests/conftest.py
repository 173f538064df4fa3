"""
Shared pytest fixtures for backend tests.
Uses a temporary SQLite database file for isolation and a fake model call.
"""
import pytest
import sqlite3
import sys
import os
from datetime import datetime
from zoneinfo import ZoneInfo

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
import llm_client


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE todos (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            due_date TEXT,
            priority TEXT NOT NULL DEFAULT 'medium',
            category TEXT NOT NULL DEFAULT 'personal',
            completed INTEGER DEFAULT 0,
            created_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app.
    Mocks init_db to skip alembic migrations.
    """
    from fastapi.testclient import TestClient
    import main

    # main imported init_db by name, so patch it there too
    monkeypatch.setattr(main, "init_db", lambda: None)

    with TestClient(main.app) as client:
        yield client


class FakeCompletion:
    """Stands in for llm_client.complete: records prompts, returns a canned reply or raises."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_model(monkeypatch):
    """Replace the model call for the whole app. Set .reply or .error per test."""
    fake = FakeCompletion()
    monkeypatch.setattr(llm_client, "complete", fake)
    return fake


@pytest.fixture
def reference():
    """Wednesday 2025-01-15 15:04:05 in Seoul."""
    return datetime(2025, 1, 15, 15, 4, 5, tzinfo=ZoneInfo("Asia/Seoul"))
