"""
HTTP surface through FastAPI's TestClient with the registry overridden.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeAnswerAdapter, FakeSearchAdapter, make_registry
from orsbot.main import app
from orsbot.schemas.search import SearchOutcome, SearchResult
from orsbot.services.providers import get_provider_registry


@pytest.fixture
def client_with():
    def build(registry):
        app.dependency_overrides[get_provider_registry] = lambda: registry
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


def body(question="Xin chào", workflow="single", **extra):
    return {"messages": [{"role": "user", "content": question}], "workflow": workflow, **extra}


def test_health(client_with):
    response = client_with(make_registry()).get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "ors-bot"}


@pytest.mark.parametrize("path", ["/api/v1/chat", "/api/direct-chat"])
def test_chat_success(client_with, path):
    registry = make_registry(answer=FakeAnswerAdapter("Xin chào! Tôi có thể giúp gì cho bạn?"))
    response = client_with(registry).post(path, json=body())

    assert response.status_code == 200
    data = response.json()
    assert data["answer_text"] == "Xin chào! Tôi có thể giúp gì cho bạn?"
    assert data["workflow"] == "single"
    assert data["error_kind"] is None
    assert [entry["stage"] for entry in data["stage_trace"]] == ["answer"]
    assert "status_code" not in data


def test_chat_with_search_returns_results(client_with):
    outcome = SearchOutcome(
        provider="tavily",
        summary="Tóm tắt.",
        results=[SearchResult(title="SJC", url="https://sjc.com.vn")],
    )
    registry = make_registry(tavily=FakeSearchAdapter("tavily", outcome))
    response = client_with(registry).post("/api/v1/chat", json=body("giá vàng hôm nay", "tavily-to-gemini"))

    data = response.json()
    assert response.status_code == 200
    assert data["search_results"]["results"][0]["url"] == "https://sjc.com.vn"
    assert data["answer_text"].endswith("Nguồn tham khảo:\n1) SJC - https://sjc.com.vn")


def test_validation_failure_status(client_with):
    response = client_with(make_registry()).post("/api/v1/chat", json=body("   "))
    assert response.status_code == 400
    data = response.json()
    assert data["error_kind"] == "empty_question"
    assert data["remedy"] == "rephrase"
    assert data["answer_text"] is None


def test_configuration_failure_status(client_with):
    registry = make_registry(answer=FakeAnswerAdapter(configured=False))
    response = client_with(registry).post("/api/v1/chat", json=body())
    assert response.status_code == 500
    assert response.json()["error_kind"] == "missing_api_key"


def test_unexpected_error_is_internal_error(client_with):
    registry = make_registry(answer=FakeAnswerAdapter(error=RuntimeError("boom")))
    response = client_with(registry).post("/api/v1/chat", json=body())

    assert response.status_code == 500
    data = response.json()
    assert data["error_kind"] == "internal_error"
    assert "boom" not in data["message"]


def test_malformed_body_is_rejected(client_with):
    response = client_with(make_registry()).post("/api/v1/chat", json={"workflow": "single"})
    assert response.status_code == 422


def test_list_workflows(client_with):
    data = client_with(make_registry()).get("/api/v1/workflows").json()
    by_id = {item["id"]: item for item in data}
    assert by_id["perplexity-chatgpt-gemini"]["stages"] == ["search", "rewrite", "answer"]
    assert by_id["tavily-to-gemini"]["search_provider"] == "tavily"
    assert by_id["single"]["stages"] == ["answer"]


def test_list_models(client_with):
    data = client_with(make_registry()).get("/api/v1/models").json()
    by_id = {item["id"]: item for item in data}
    assert by_id["gemini-2.5-flash"] == {"id": "gemini-2.5-flash", "provider": "google", "answer_capable": True}
    assert by_id["gpt-4o"]["answer_capable"] is False
