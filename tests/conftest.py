# tests/conftest.py

from __future__ import annotations

import mongomock
import pytest

from fakes import FakeAIClient
from task_tracker.app import create_app


@pytest.fixture()
def ai_client() -> FakeAIClient:
    return FakeAIClient(completion_text="• Enhanced task", transcript="buy milk tomorrow")


@pytest.fixture()
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture()
def app(mongo_client, ai_client):
    """
    App wired to an in-memory Mongo and a fake AI client.

    No network access: the AI key is a dummy and never used because the
    fake client is injected.
    """
    return create_app(
        {
            "TESTING": True,
            "MONGO_CLIENT": mongo_client,
            "MONGO_DB_NAME": "task_tracker_test",
            "AI_API_KEY": "test-key",
            "LOG_LEVEL": "DEBUG",
        },
        ai_client=ai_client,
    )


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def tasks_collection(mongo_client):
    return mongo_client["task_tracker_test"].tasks


@pytest.fixture()
def make_task(client):
    """POST a task and return its JSON body."""

    def _make(description="Write report", date="2026-10-18", category="Work"):
        resp = client.post(
            "/api/tasks",
            json={"description": description, "date": date, "category": category},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["task"]

    return _make
