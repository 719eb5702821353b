import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services import ai_service
from app.services.state import SESSIONS
from simulation import scenarios


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch, tmp_path):
    """Keeps sessions, the shared config and the config file path test-local."""
    monkeypatch.setattr(scenarios, "GAME_CONFIG_PATH", tmp_path / "config" / "game_config.json")
    monkeypatch.setattr(scenarios, "DEFAULT_CONFIG", scenarios.GameConfig())
    # No AI provider unless a test installs a fake one
    monkeypatch.setattr(ai_service, "ai_provider", None)
    SESSIONS.clear()
    yield
    SESSIONS.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def config():
    return scenarios.GameConfig()
