import pytest
from unittest.mock import patch

from bookfinder.cache import recommendation_cache

CONFIG_ENV_KEYS = [
    "OPENROUTER_API_KEY", "GOOGLE_API_KEY", "GOOGLE_CX", "LLM_MODEL",
    "LLM_TIMEOUT", "CACHE_TTL_SECONDS", "USE_STATIC_FALLBACK",
]

@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Ignore the developer's .env and ~/.bookfinder_config.json in every test."""
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    with patch('bookfinder.config.config.file_config', {}):
        yield

@pytest.fixture(autouse=True)
def clean_cache():
    recommendation_cache.clear()
    yield
    recommendation_cache.clear()
