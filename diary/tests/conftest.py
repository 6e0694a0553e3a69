import pytest
from fastapi.testclient import TestClient
import os

from diary.app.config import Settings
from diary.app.database import DiaryStore
from diary.app.main import create_app
from diary.app.models.models import DiaryEntry
from diary.client.api_client import DiaryApiClient

# Use a test database
TEST_DATABASE_URL = "sqlite:///./test.db"

@pytest.fixture(scope="session")
def test_settings():
    return Settings(database_url=TEST_DATABASE_URL, _env_file=None)

@pytest.fixture(scope="session")
def store(test_settings):
    store = DiaryStore(test_settings)
    store.connect()
    yield store
    # Teardown - close the pool and remove the file
    store.dispose()
    if os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(store):
    """Returns a fresh session on an empty diary for each test"""
    session = store.session()

    # Clear out test data from previous run
    session.query(DiaryEntry).delete()
    session.commit()

    yield session
    session.close()

@pytest.fixture
def make_client(store, db_session):
    """Builds a test client for an app with optional setting overrides"""
    clients = []

    def _make(**overrides):
        settings = store.settings.model_copy(update=overrides) if overrides else store.settings
        test_client = TestClient(create_app(settings, store=store))
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)

@pytest.fixture
def client(make_client):
    return make_client()

@pytest.fixture
def api_client(client):
    """Diary API client talking to the in-process app"""
    return DiaryApiClient("/api/v1", session=client, timeout=None)

@pytest.fixture
def entry_payload():
    return {
        "date": "2024-01-01",
        "mood": 7,
        "learned": "Rest is part of the work",
        "improvements": "Start the day with a plan",
        "gratitude": ["Sunny morning", "Good coffee"],
        "lookingForward": "Dinner with friends",
        "news": "The library reopened",
    }

@pytest.fixture
def create_entry(client, entry_payload):
    """Creates an entry through the API and returns the response body"""
    def _create(**overrides):
        response = client.post("/api/v1/entries", json={**entry_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()
    return _create
