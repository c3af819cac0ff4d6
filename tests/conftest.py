import pytest

from refiner.settings import API_KEY_ENV


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "sk-test-key")
    return "sk-test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv(API_KEY_ENV, raising=False)
