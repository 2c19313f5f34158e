import http.client
import json

import pytest

from models import RoleEnum
from services import ai_client
from services.ai_client import AIClient, AIUnavailableError
from services.assistant_service import AssistantService


class FakeResponse:
    def __init__(self, body):
        self.body = body

    def read(self):
        return self.body.encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setenv("AI_API_KEY", "test-key")
    monkeypatch.delenv("AI_PROVIDER", raising=False)


def _reply_with(monkeypatch, body):
    monkeypatch.setattr(ai_client.urlrequest, "urlopen", lambda request, timeout=None: FakeResponse(body))


def _fail_with(monkeypatch, error):
    def _urlopen(request, timeout=None):
        raise error

    monkeypatch.setattr(ai_client.urlrequest, "urlopen", _urlopen)


def test_generate_returns_stripped_text(configured, monkeypatch):
    _reply_with(monkeypatch, json.dumps({
        "model": "gpt-test",
        "choices": [{"message": {"content": "  Dear parents  "}}],
    }))
    result = AIClient().generate("hello")
    assert result == {"text": "Dear parents", "model": "gpt-test", "provider": "openai"}


def test_null_content_becomes_empty_text(configured, monkeypatch):
    _reply_with(monkeypatch, json.dumps({"choices": [{"message": {"content": None}}]}))
    assert AIClient().generate("hello")["text"] == ""

    result = AssistantService.draft("Uniform reminder", "announcement")
    assert result["ok"] is False
    assert result["text"] == AssistantService.EMPTY_REPLY


@pytest.mark.parametrize("body", ["not json", "[1, 2]"])
def test_unparsable_replies_become_unavailable(configured, monkeypatch, body):
    _reply_with(monkeypatch, body)
    with pytest.raises(AIUnavailableError):
        AIClient().generate("hello")


def test_reply_without_choices_is_empty(configured, monkeypatch):
    _reply_with(monkeypatch, json.dumps({"choices": "none"}))
    assert AIClient().generate("hello")["text"] == ""


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError("peer reset"),
        http.client.RemoteDisconnected("closed"),
        http.client.IncompleteRead(b"partial"),
    ],
)
def test_socket_failures_become_unavailable(configured, monkeypatch, error):
    _fail_with(monkeypatch, error)
    with pytest.raises(AIUnavailableError):
        AIClient().generate("hello")

    assert AssistantService.suggest_point_reasons("Blue") == AssistantService.FALLBACK_REASONS
    draft = AssistantService.draft("Hi", "general")
    assert draft["ok"] is False
    assert draft["text"] == AssistantService.ERROR_REPLY


def test_draft_endpoint_answers_placeholder_on_null_content(client, login_as, monkeypatch):
    login_as(RoleEnum.EDITOR)
    monkeypatch.setenv("AI_API_KEY", "test-key")
    _reply_with(monkeypatch, json.dumps({"choices": [{"message": {"content": None}}]}))

    response = client.post("/api/assistant/draft", json={"prompt": "Sports day notice"})
    assert response.status_code == 200
    assert response.get_json()["text"] == AssistantService.EMPTY_REPLY
