"""
- Keep random.org out of the test run (local seeds only)
- Provide a fresh GameStore per test and override FastAPI's get_store so routes use it.
- Provide a client fixture (TestClient(app)) that already has the override applied.
"""
import os
import pytest

from fastapi.testclient import TestClient

# Must be set before the app creates any game
os.environ["BULLSCOWS_RANDOM_SOURCE"] = "local"

from bullscows.config import GameConfig
from bullscows.main import app, get_store
from bullscows.store import GameStore

@pytest.fixture
def config() -> GameConfig:
    """The default ruleset: 4 digits, no repeats, no leading zero."""
    return GameConfig(length=4, allow_repeats=False, allow_leading_zero=False)

@pytest.fixture
def store() -> GameStore:
    return GameStore()

@pytest.fixture(autouse=True)
def override_dep(store):
    """Force the app to use this test's store for every request."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    # Talks to the FastAPI app in-process; no server needed.
    return TestClient(app)
