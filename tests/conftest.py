"""
Test configuration for the goal tracker tests.

This module provides test fixtures and configuration for the testing infrastructure.
"""
# Set test environment variables BEFORE any imports that might use them
import os
os.environ["DATABASE_URL"] = "sqlite:///./test_goaltracker.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-goal-tracker"
os.environ["ENVIRONMENT"] = "test"
os.environ["OPENAI_API_KEY"] = ""
os.environ["DEFAULT_TIMEZONE"] = "UTC"

import pytest
from datetime import datetime, timedelta
from pathlib import Path
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from goaltracker.main import app
from goaltracker.database.models import Base, User, Goal, Task
from goaltracker.services.database_service import get_db
from goaltracker.services.auth_service import AuthService

TEST_DB_FILE = "test_goaltracker.db"
TEST_PASSWORD = "secret123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Clear cached settings and remove the test database afterwards."""
    from goaltracker.config import get_settings
    get_settings.cache_clear()

    yield

    test_db_path = Path(TEST_DB_FILE)
    if test_db_path.exists():
        test_db_path.unlink()


# Database fixtures
@pytest.fixture(scope="session")
def test_db_engine():
    """Create test database engine."""
    engine = create_engine(f"sqlite:///./{TEST_DB_FILE}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine):
    """Create a clean database session for each test."""
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    try:
        yield session
        session.rollback()
    finally:
        session.close()


# FastAPI client fixture
@pytest.fixture
def client(db_session):
    """Create FastAPI test client with database dependency override."""
    client = TestClient(app)
    client.app.dependency_overrides[get_db] = lambda: db_session
    yield client
    client.app.dependency_overrides.clear()


# Entity fixtures
@pytest.fixture
def make_user(db_session):
    """Factory creating users through the auth service."""
    def _make(email: str = "owner@example.com", password: str = TEST_PASSWORD) -> User:
        return AuthService(db_session).create_user(email, password)
    return _make


@pytest.fixture
def sample_user(make_user):
    return make_user("owner@example.com")


@pytest.fixture
def other_user(make_user):
    return make_user("intruder@example.com")


@pytest.fixture
def make_goal(db_session):
    """Factory inserting goals directly."""
    def _make(user: User, title: str = "Run a marathon", category: str = "Health", days_ahead: int = 30) -> Goal:
        goal = Goal(
            user_id=user.id,
            title=title,
            category=category,
            target_date=datetime.utcnow() + timedelta(days=days_ahead),
        )
        db_session.add(goal)
        db_session.commit()
        db_session.refresh(goal)
        return goal
    return _make


@pytest.fixture
def sample_goal(make_goal, sample_user):
    return make_goal(sample_user)


@pytest.fixture
def make_task(db_session):
    """Factory inserting tasks directly, bypassing reconciliation."""
    def _make(goal: Goal, title: str = "Task", is_completed: bool = False,
              due_date: datetime = None, priority: str = "Medium") -> Task:
        task = Task(
            goal_id=goal.id,
            user_id=goal.user_id,
            title=title,
            is_completed=is_completed,
            due_date=due_date or datetime.utcnow() + timedelta(days=1),
            priority=priority,
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task
    return _make


# HTTP helpers
@pytest.fixture
def register(client):
    """Register a user through the API and return its Authorization headers."""
    def _register(email: str = "api-user@example.com", password: str = TEST_PASSWORD) -> dict:
        response = client.post("/api/auth/register", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register


@pytest.fixture
def auth_headers(register):
    return register("api-user@example.com")


@pytest.fixture
def other_auth_headers(register):
    return register("api-other@example.com")


@pytest.fixture
def goal_payload():
    return {
        "title": "Learn Spanish",
        "description": "Hold a 10 minute conversation",
        "category": "Educational",
        "target_date": (datetime.utcnow() + timedelta(days=60)).isoformat(),
        "priority": "High",
    }


@pytest.fixture
def create_goal_via_api(client, goal_payload):
    def _create(headers: dict, **overrides) -> dict:
        response = client.post("/api/goals", json={**goal_payload, **overrides}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_task_via_api(client):
    def _create(headers: dict, goal_id: str, title: str = "Practice", **fields) -> dict:
        payload = {
            "title": title,
            "due_date": (datetime.utcnow() + timedelta(days=1)).isoformat(),
            **fields,
        }
        response = client.post(f"/api/goals/{goal_id}/tasks", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
