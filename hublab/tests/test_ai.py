import json

import pytest
from fastapi.testclient import TestClient

from hublab.app.core.config import settings
from hublab.app.integrations.groq import client as groq_client
from hublab.app.integrations.groq.client import AIUpstreamError
from hublab.app.services import ai_service
from hublab.app.services.ai_service import AIParseError, fill_defaults, parse_project_json, strip_fences
from hublab.main import app

client = TestClient(app)

AI_PROJECT = {
    "name": "Recipe Box",
    "screens": [
        {
            "id": "home",
            "name": "Home",
            "root": {"id": "search", "capsuleId": "searchbar", "props": {"placeholder": "Find a recipe"}},
        }
    ],
}


class FakeGroq:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages, **kwargs):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_groq(monkeypatch):
    def install(reply=None, error=None):
        fake = FakeGroq(reply, error)
        monkeypatch.setattr(ai_service, "get_groq_client", lambda: fake)
        return fake
    return install


def test_strip_fences():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_fences('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_project_json_tolerates_chatter():
    assert parse_project_json('Here you go: {"name": "x", "note": "a } b"} enjoy') == {"name": "x", "note": "a } b"}
    with pytest.raises(AIParseError) as exc:
        parse_project_json("no json here")
    assert exc.value.raw == "no json here"
    with pytest.raises(AIParseError):
        parse_project_json("[1, 2]")


def test_fill_defaults():
    out = fill_defaults({"name": "x", "screens": []})
    assert out["version"] == "1.0.0"
    assert out["targets"] == ["ios", "android"]
    assert out["theme"] == {"colors": {"primary": "#6366F1"}}
    assert fill_defaults({"targets": ["ios"]}, ["web"])["targets"] == ["web"]


def test_ai_generate_requires_prompt():
    r = client.post("/ai/generate", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing prompt"


def test_ai_generate_without_key(monkeypatch):
    monkeypatch.setattr(settings, "groq_api_key", "")
    groq_client.reset_groq_client()
    try:
        r = client.post("/ai/generate", json={"prompt": "a recipe app"})
    finally:
        groq_client.reset_groq_client()
    assert r.status_code == 500
    assert r.json()["detail"] == "GROQ_API_KEY not configured"


def test_ai_generate_fills_defaults(fake_groq):
    fake = fake_groq("```json\n" + json.dumps(AI_PROJECT) + "\n```")
    r = client.post("/ai/generate", json={"prompt": "a recipe app"})
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["message"] == 'Generated "Recipe Box" with 1 screens'
    assert data["project"]["version"] == "1.0.0"
    assert data["project"]["targets"] == ["ios", "android"]
    system, user = fake.calls[0]
    assert system["content"] == ai_service.SYSTEM_PROMPT
    assert user["content"] == "Create a mobile app for: a recipe app"


def test_ai_generate_parse_failure_returns_raw(fake_groq):
    fake_groq("I cannot do that")
    r = client.post("/ai/generate", json={"prompt": "x"})
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail["error"] == "Failed to parse AI response"
    assert detail["raw"] == "I cannot do that"


def test_ai_generate_invalid_structure(fake_groq):
    fake_groq(json.dumps({"name": "No screens"}))
    r = client.post("/ai/generate", json={"prompt": "x"})
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail["error"] == "Invalid project structure from AI"
    assert detail["project"] == {"name": "No screens"}


def test_ai_generate_upstream_failure(fake_groq):
    fake_groq(error=AIUpstreamError("AI generation failed", details='{"error": "rate_limited"}'))
    r = client.post("/ai/generate", json={"prompt": "x"})
    assert r.status_code == 500
    assert r.json()["detail"] == {"error": "AI generation failed", "details": '{"error": "rate_limited"}'}


def test_ai_build_forces_targets(fake_groq):
    fake = fake_groq(json.dumps({**AI_PROJECT, "targets": ["ios"]}))
    r = client.post("/ai/build", json={"prompt": "a recipe app", "targets": ["web"]})
    assert r.status_code == 200
    data = r.json()
    assert data["prompt"] == "a recipe app"
    assert data["project"]["targets"] == ["web"]
    assert [res["platform"] for res in data["results"]] == ["web"]
    assert data["summary"]["totalFiles"] == 3
    assert fake.calls[0][1]["content"] == "Create a mobile app for: a recipe app. Target platforms: web"


def test_ai_build_default_targets(fake_groq):
    fake_groq(json.dumps(AI_PROJECT))
    r = client.post("/ai/build", json={"prompt": "a recipe app"})
    assert r.status_code == 200
    assert [res["platform"] for res in r.json()["results"]] == ["ios", "android"]


@pytest.mark.parametrize("reply", [{"name": "X", "screens": 5}, {"name": 7, "screens": [{"id": "a"}]}, {"screens": []}])
def test_ai_generate_malformed_structure_carries_project(fake_groq, reply):
    fake_groq(json.dumps(reply))
    r = client.post("/ai/generate", json={"prompt": "x"})
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail["error"] == "Invalid project structure from AI"
    assert detail["project"] == reply


def test_ai_build_tree_breach_is_collaborator_failure(fake_groq):
    root = {"id": "leaf", "capsuleId": "text", "props": {}}
    for i in range(100):
        root = {"id": f"n{i}", "capsuleId": "card", "props": {}, "children": [root]}
    doc = {"name": "Deep", "screens": [{"id": "home", "name": "Home", "root": root}]}
    fake_groq(json.dumps(doc))
    r = client.post("/ai/build", json={"prompt": "deep", "targets": ["ios"]})
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail["error"] == "AI build failed"
    assert "max depth" in detail["details"]
    assert detail["project"]["name"] == "Deep"
