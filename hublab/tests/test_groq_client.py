from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from hublab.app.core.config import settings
from hublab.app.integrations.groq.client import AIUnavailable, AIUpstreamError, GroqClient


def _client_with(create, monkeypatch):
    monkeypatch.setattr(settings, "groq_api_key", "test-key")
    c = GroqClient()
    c._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return c


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_disabled_without_key(monkeypatch):
    monkeypatch.setattr(settings, "groq_api_key", "  ")
    with pytest.raises(AIUnavailable):
        GroqClient().complete([{"role": "user", "content": "hi"}])


def test_complete_sends_configured_request(monkeypatch):
    seen = {}

    def create(**req):
        seen.update(req)
        return _reply('{"name": "x"}')

    c = _client_with(create, monkeypatch)
    assert c.complete([{"role": "user", "content": "hi"}]) == '{"name": "x"}'
    assert seen["model"] == settings.groq_model
    assert seen["temperature"] == settings.groq_temperature
    assert seen["max_tokens"] == settings.groq_max_tokens


def test_empty_reply_is_upstream_error(monkeypatch):
    c = _client_with(lambda **req: _reply(None), monkeypatch)
    with pytest.raises(AIUpstreamError) as exc:
        c.complete([])
    assert str(exc.value) == "No content from AI"


def test_api_errors_are_wrapped_and_retried(monkeypatch):
    monkeypatch.setattr(settings, "groq_max_attempts", 2)
    attempts = []

    def create(**req):
        attempts.append(1)
        raise APIConnectionError(request=httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions"))

    c = _client_with(create, monkeypatch)
    with pytest.raises(AIUpstreamError) as exc:
        c.complete([])
    assert len(attempts) == 2
    assert exc.value.details == "Connection error."
