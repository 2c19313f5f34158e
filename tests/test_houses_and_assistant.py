import pytest
from sqlalchemy.exc import SQLAlchemyError

from api.services.house_service import HouseService
from extensions import db
from models import House, RoleEnum
from services.ai_client import AIUnavailableError
from services.assistant_service import AssistantService


class FakeClient:
    provider = "fake"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    @property
    def is_available(self):
        return True

    def generate(self, prompt, *, json_mode=False):
        self.prompts.append((prompt, json_mode))
        if self.error:
            raise self.error
        return {"text": self.text, "model": "fake-1", "provider": self.provider}


@pytest.fixture
def house(app):
    house = House(name="Kabalega", color="#dc2626", points=10, members=40)
    db.session.add(house)
    db.session.commit()
    return house


def test_award_and_deduct_points_never_below_zero(client, login_as, house):
    login_as(RoleEnum.ADMIN)
    url = f"/api/houses/{house.id}/points"

    assert client.post(url, json={"points": 15}).get_json()["house"]["points"] == 25
    assert client.post(url, json={"points": -40}).get_json()["house"]["points"] == 0


@pytest.mark.parametrize("points", [0, "lots", True, None])
def test_award_points_rejects_invalid_values(client, login_as, house, points):
    login_as(RoleEnum.ADMIN)
    response = client.post(f"/api/houses/{house.id}/points", json={"points": points})
    assert response.status_code == 400


def test_houses_are_ranked_by_points(client, login_as, house):
    login_as(RoleEnum.TEACHER)
    db.session.add(House(name="Mwanga", points=30))
    db.session.commit()
    assert [h["name"] for h in client.get("/api/houses").get_json()] == ["Mwanga", "Kabalega"]


def test_suggestions_fall_back_without_ai(client, login_as, house):
    login_as(RoleEnum.ADMIN)
    body = client.get(f"/api/houses/{house.id}/suggestions").get_json()
    assert body["reasons"] == AssistantService.FALLBACK_REASONS
    assert client.get("/api/houses/999/suggestions").status_code == 404


def test_suggestions_parse_json_reply():
    client = FakeClient(text='{"reasons": ["Clean compound", "Debate win", " "]}')
    reasons = AssistantService.suggest_point_reasons("Kabalega", client=client)
    assert reasons == ["Clean compound", "Debate win"]
    assert client.prompts[0][1] is True
    assert "Kabalega" in client.prompts[0][0]


def test_suggestions_with_bad_json_or_error_use_fallback():
    assert AssistantService.suggest_point_reasons("Mwanga", client=FakeClient(text="not json")) \
        == AssistantService.FALLBACK_REASONS
    failing = FakeClient(error=AIUnavailableError("timeout"))
    assert AssistantService.suggest_point_reasons("Mwanga", client=failing) == AssistantService.FALLBACK_REASONS


def test_suggestions_with_empty_reply_are_empty():
    assert AssistantService.suggest_point_reasons("Mwanga", client=FakeClient(text="")) == []


def test_draft_builds_prompt_with_mode_context():
    client = FakeClient(text="Dear parents, ...")
    result = AssistantService.draft("Announce sports day", "announcement", client=client)
    assert result["ok"] is True
    assert result["text"] == "Dear parents, ..."
    prompt = client.prompts[0][0]
    assert "formal school announcement" in prompt
    assert "Task: Announce sports day" in prompt


def test_draft_errors_become_placeholder_text():
    result = AssistantService.draft("Hi", "general", client=FakeClient(error=AIUnavailableError("down")))
    assert result["ok"] is False
    assert result["text"] == AssistantService.ERROR_REPLY

    result = AssistantService.draft("Hi", "general", client=FakeClient(text=""))
    assert result["text"] == AssistantService.EMPTY_REPLY


def test_assistant_endpoint(client, login_as):
    login_as(RoleEnum.EDITOR)
    assert client.post("/api/assistant/draft", json={"prompt": "  "}).status_code == 400
    assert client.post("/api/assistant/draft", json={"prompt": "Hi", "mode": "poem"}).status_code == 400

    body = client.post("/api/assistant/draft", json={"prompt": "Uniform reminder"}).get_json()
    assert body["ok"] is False
    assert body["text"] == AssistantService.UNAVAILABLE_REPLY

    prompts = client.get("/api/assistant/prompts").get_json()
    assert sorted(prompts["modes"]) == ["announcement", "general"]


def test_assistant_is_closed_to_teachers(client, login_as):
    login_as(RoleEnum.TEACHER)
    assert client.post("/api/assistant/draft", json={"prompt": "Hi"}).status_code == 403


def test_database_errors_become_json(client, login_as, monkeypatch):
    login_as(RoleEnum.TEACHER)

    def _broken():
        raise SQLAlchemyError("relation houses is locked")

    monkeypatch.setattr(HouseService, "list_houses", staticmethod(_broken))
    response = client.get("/api/houses")
    assert response.status_code == 500
    body = response.get_json()
    assert body["code"] == "database_error"
    assert "relation houses is locked" in body["error"]
