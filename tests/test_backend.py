"""
HTTP-level tests for the FastAPI backend.

The completion service is replaced through the ``get_client_factory``
dependency, so these tests run without network access or a real API key.
"""

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from conveo_insights.backend import app, get_client_factory, get_settings
from conveo_insights.completion import CompletionClient
from conveo_insights.config import Settings
from conveo_insights.errors import InvalidCredential


class FakeCompletionClient:
    reply = '{"summary": "s", "themes": [{"title": "a", "description": "d"}, "b"]}'
    error = None
    seen_keys = []
    seen_messages = []
    closed = 0

    def __init__(self, api_key):
        self.seen_keys.append(api_key)

    def complete(self, messages):
        if self.error is not None:
            raise self.error
        self.seen_messages.append(messages)
        return self.reply

    def verify_key(self):
        if self.error is not None:
            raise self.error

    def close(self):
        FakeCompletionClient.closed += 1


@pytest.fixture
def client():
    FakeCompletionClient.reply = '{"summary": "s", "themes": [{"title": "a", "description": "d"}, "b"]}'
    FakeCompletionClient.error = None
    FakeCompletionClient.seen_keys = []
    FakeCompletionClient.seen_messages = []
    FakeCompletionClient.closed = 0
    app.dependency_overrides[get_client_factory] = lambda: FakeCompletionClient
    app.dependency_overrides[get_settings] = lambda: Settings(openai_api_key=None)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_list_and_get_studies(client):
    resp = client.get("/studies")
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == ["1", "2"]

    detail = client.get("/studies/1")
    assert detail.status_code == 200
    assert detail.json()["persona"] == "Frequent online shoppers"


def test_unknown_study_is_404(client):
    resp = client.get("/studies/42")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Study not found"

    resp = client.post("/studies/42/insights", json={"snippet": "hi"}, headers={"X-OpenAI-Key": "sk"})
    assert resp.status_code == 404


def test_modes(client):
    assert client.get("/modes").json() == ["default", "researcher", "stepwise"]


def test_generate_insights(client):
    resp = client.post(
        "/studies/1/insights",
        json={"snippet": "Checkout times out on mobile.", "mode": "researcher"},
        headers={"X-OpenAI-Key": "sk-user"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "summary": "s",
        "themes": [{"title": "a", "description": "d"}, {"title": "b", "description": ""}],
    }
    assert FakeCompletionClient.seen_keys == ["sk-user"]
    assert "Checkout times out on mobile." in FakeCompletionClient.seen_messages[0][1].content


def test_generate_falls_back_to_server_key(client):
    app.dependency_overrides[get_settings] = lambda: Settings(openai_api_key="sk-server")
    resp = client.post("/studies/2/insights", json={"snippet": "Onboarding was slow."})
    assert resp.status_code == 200
    assert FakeCompletionClient.seen_keys == ["sk-server"]


def test_generate_without_key_or_snippet(client):
    resp = client.post("/studies/1/insights", json={"snippet": "text"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please set your OpenAI key on the home page first."

    resp = client.post("/studies/1/insights", json={"snippet": "  "}, headers={"X-OpenAI-Key": "sk"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please paste an interview snippet."
    assert FakeCompletionClient.seen_keys == []


def test_generate_with_unknown_mode(client):
    resp = client.post(
        "/studies/1/insights", json={"snippet": "text", "mode": "poetic"}, headers={"X-OpenAI-Key": "sk"}
    )
    assert resp.status_code == 422


def test_malformed_reply_is_502(client):
    FakeCompletionClient.reply = "Sorry, I can't do that."
    resp = client.post("/studies/1/insights", json={"snippet": "text"}, headers={"X-OpenAI-Key": "sk"})
    assert resp.status_code == 502


def test_validate_key(client):
    resp = client.post("/credentials/validate", json={"api_key": " sk-good "})
    assert resp.status_code == 200
    assert resp.json()["valid"] is True
    assert FakeCompletionClient.seen_keys == ["sk-good"]

    resp = client.post("/credentials/validate", json={"api_key": ""})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please enter an API key."


def test_validate_rejected_key(client):
    FakeCompletionClient.error = InvalidCredential()
    resp = client.post("/credentials/validate", json={"api_key": "sk-bad"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "API key appears invalid. Please check and try again."


def test_real_client_maps_connection_errors(client):
    """The default factory wraps openai errors; a connection failure surfaces as 502."""

    def failing_transport(request):
        raise httpx.ConnectError("offline", request=request)

    def factory(api_key):
        return CompletionClient(
            api_key,
            client=openai.OpenAI(
                api_key=api_key,
                max_retries=0,
                http_client=httpx.Client(transport=httpx.MockTransport(failing_transport)),
            ),
        )

    app.dependency_overrides[get_client_factory] = lambda: factory
    resp = client.post("/studies/1/insights", json={"snippet": "text"}, headers={"X-OpenAI-Key": "sk"})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to generate insights. Please try again."


def test_each_request_closes_its_completion_client(client):
    for _ in range(3):
        assert client.post("/credentials/validate", json={"api_key": "sk-good"}).status_code == 200
    client.post("/studies/1/insights", json={"snippet": "text"}, headers={"X-OpenAI-Key": "sk"})
    assert len(FakeCompletionClient.seen_keys) == 4
    assert FakeCompletionClient.closed == 4
