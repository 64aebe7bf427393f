import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from bookfinder.api import app
from bookfinder.cache import recommendation_cache
from bookfinder.models import Book, Recommendation, SearchResult

client = TestClient(app)

@pytest.fixture
def populated_result():
    return SearchResult(
        books=[Book(id="ai-rec-0", title="Dune", author=["Frank Herbert"], cover_url="https://c/1.jpg",
                    download_url="https://x/dune.pdf")],
        total_results=1,
        query="dune",
        enhanced_query="dune ecology",
        search_terms=["ecology"],
        ai_recommendations_count=1,
        pdf_found_count=1,
        books_without_pdfs=0,
    )

def test_search_returns_camel_case_result(populated_result):
    with patch("bookfinder.api.book_search.search", new=AsyncMock(return_value=populated_result)) as mock_search:
        response = client.post("/search", json={"query": "  dune "})

    assert response.status_code == 200
    data = response.json()
    assert data["totalResults"] == 1
    assert data["pdfFoundCount"] == 1
    assert data["booksWithoutPDFs"] == 0
    assert data["books"][0]["downloadUrl"] == "https://x/dune.pdf"
    assert data["books"][0]["isAIRecommendation"] is True
    mock_search.assert_awaited_once_with("dune")

def test_search_empty_result_shape():
    with patch("bookfinder.api.book_search.search", new=AsyncMock(return_value=SearchResult.empty("dune"))):
        response = client.post("/search", json={"query": "dune"})

    assert response.status_code == 200
    assert response.json() == {
        "books": [],
        "totalResults": 0,
        "query": "dune",
        "aiRecommendationsCount": 0,
        "pdfFoundCount": 0,
    }

def test_search_rejects_blank_query():
    response = client.post("/search", json={"query": "   "})
    assert response.status_code == 400

def test_search_unexpected_error_is_500():
    with patch("bookfinder.api.book_search.search", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = client.post("/search", json={"query": "dune"})
    assert response.status_code == 500

def test_clear_cache():
    recommendation_cache.put("dune", Recommendation(enhanced_query="d", recommendations=[], search_terms=[]))

    response = client.post("/cache/clear")

    assert response.status_code == 200
    assert response.json() == {"success": True, "cleared": 1}
    assert recommendation_cache.get("dune") is None

def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

def test_get_config_masks_secrets(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-1234567890")
    monkeypatch.setenv("GOOGLE_API_KEY", "AIzaabcd")

    with patch("bookfinder.api.config._load_from_file"):
        masked = client.get("/config").json()
        revealed = client.get("/config", params={"reveal_keys": True}).json()

    assert masked["OPENROUTER_API_KEY"] == "***7890"
    assert masked["GOOGLE_API_KEY"] == "***abcd"
    assert masked["GOOGLE_CX"] is None
    assert masked["USE_STATIC_FALLBACK"] is False
    assert revealed["OPENROUTER_API_KEY"] == "sk-or-1234567890"

def test_update_config_rejects_unknown_key():
    response = client.post("/config", json={"key": "DEST_DIR", "value": "/tmp"})
    assert response.status_code == 400

def test_update_config_saves(tmp_path):
    with patch("bookfinder.config.CONFIG_PATH", tmp_path / "config.json"):
        response = client.post("/config", json={"key": "LLM_MODEL", "value": "some/model"})

    assert response.status_code == 200
    assert (tmp_path / "config.json").exists()

@pytest.mark.parametrize("key,value", [
    ("LLM_TIMEOUT", "abc"),
    ("LLM_TIMEOUT", "-1"),
    ("CACHE_TTL_SECONDS", "0"),
    ("CACHE_TTL_SECONDS", "nan"),
    ("USE_STATIC_FALLBACK", "maybe"),
])
def test_update_config_rejects_bad_values(tmp_path, key, value):
    path = tmp_path / "config.json"
    with patch("bookfinder.config.CONFIG_PATH", path):
        response = client.post("/config", json={"key": key, "value": value})

    assert response.status_code == 400
    assert key in response.json()["detail"]
    assert not path.exists()

def test_update_config_accepts_numeric_values(tmp_path):
    with patch("bookfinder.config.CONFIG_PATH", tmp_path / "config.json"):
        response = client.post("/config", json={"key": "LLM_TIMEOUT", "value": "8.5"})
        assert client.get("/config").json()["LLM_TIMEOUT"] == 8.5

    assert response.status_code == 200
