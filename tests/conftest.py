"""
Shared test fixtures and configuration for pytest.
"""

import pytest

from config import settings as settings_module
from tests.fakes import make_openai_client


@pytest.fixture(autouse=True)
def openai_env(monkeypatch):
    """Every test starts with a known environment and no cached settings."""
    for name in [
        "OPENAI_CHAT_MODEL", "OPENAI_EMBEDDING_MODEL", "AZURE_OPENAI_ENDPOINT",
        "AZURE_OPENAI_API_VERSION", "RAG_CHUNK_SIZE", "RAG_TOP_K",
        "RAG_CAESAR_SHIFT", "RAG_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


@pytest.fixture
def mock_openai_client():
    return make_openai_client()
