"""
Shared pytest fixtures for backend tests.
Each app client gets a fresh in-memory store and no AI key.
"""
import pytest
import sys
import os
from datetime import datetime, timedelta, timezone

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai_service import AIService
from config import AIConfig
from models import Category, Task

from fakes import FakeAnthropicClient

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_task(task_id, title, created_days_ago=0, **fields) -> Task:
    """Build a Task created `created_days_ago` days before NOW."""
    fields.setdefault("created_at", NOW - timedelta(days=created_days_ago))
    fields.setdefault("updated_at", fields["created_at"])
    fields.setdefault("category", Category.PERSONAL)
    return Task(id=task_id, title=title, **fields)


@pytest.fixture
def offline_env(monkeypatch):
    """Environment with no AI key and no sample data."""
    # Empty values also stop load_dotenv from filling these in
    monkeypatch.setenv("TASKFLOW_AI_API_KEY", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("TASKFLOW_SEED_SAMPLE_TASKS", "0")


@pytest.fixture
def app_client(offline_env):
    """
    Create a test client for the FastAPI app.
    Entering the client runs the lifespan, which builds fresh app state.
    """
    from fastapi.testclient import TestClient
    import main

    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def seeded_client(offline_env, monkeypatch):
    """App client started with the sample tasks."""
    from fastapi.testclient import TestClient
    import main

    monkeypatch.setenv("TASKFLOW_SEED_SAMPLE_TASKS", "1")
    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def fake_llm():
    return FakeAnthropicClient()


@pytest.fixture
def ai_service(fake_llm):
    """AIService with a key configured and the fake provider client."""
    return AIService(AIConfig(api_key="test-key", model="test-model"), client=fake_llm)


@pytest.fixture
def ai_client(app_client, ai_service):
    """App client whose AI calls go to the fake provider client."""
    import main

    main.app.state.ai = ai_service
    return app_client
