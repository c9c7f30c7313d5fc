import http.client

import pytest

from appio.advisor import AdvisoryClient, SYSTEM_INSTRUCTION


def _reply(*texts):
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


def test_missing_key_returns_error_text():
    calls = []
    client = AdvisoryClient(transport=lambda *a: calls.append(a) or _reply("x"))
    out = client.ask("How do I calibrate?")
    assert out.startswith("Error:")
    assert "API Key is missing" in out
    assert calls == []


def test_key_from_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "env-key")
    seen = {}

    def transport(url, payload, timeout):
        seen["url"] = url
        return _reply("ok")

    assert AdvisoryClient(transport=transport).ask("q") == "ok"
    assert seen["url"].endswith("?key=env-key")


def test_request_shape_and_joined_answer():
    seen = {}

    def transport(url, payload, timeout):
        seen.update(url=url, payload=payload, timeout=timeout)
        return _reply("Use ", "Tsai-Lenz.")

    client = AdvisoryClient(api_key="k", model="some-model", transport=transport, timeout=5.0)
    assert client.ask("Which hand-eye method?") == "Use Tsai-Lenz."
    assert "some-model" in seen["url"]
    assert seen["timeout"] == 5.0
    payload = seen["payload"]
    assert payload["systemInstruction"]["parts"][0]["text"] == SYSTEM_INSTRUCTION
    assert payload["contents"][0]["parts"][0]["text"] == "Which hand-eye method?"


def test_empty_candidates():
    client = AdvisoryClient(api_key="k", transport=lambda *a: {"candidates": []})
    assert client.ask("q") == "No response generated."


def test_transport_failure_is_reported_not_raised():
    def transport(url, payload, timeout):
        raise OSError("connection refused")

    out = AdvisoryClient(api_key="k", transport=transport).ask("q")
    assert out.startswith("Error: connection refused")
    assert "API Key" in out


def test_blank_prompt_skips_request():
    calls = []
    client = AdvisoryClient(api_key="k", transport=lambda *a: calls.append(a) or _reply("x"))
    assert client.ask("   ") == ""
    assert calls == []


def test_malformed_http_reply_is_reported_not_raised():
    def transport(url, payload, timeout):
        raise http.client.BadStatusLine("NOT-HTTP garbage")

    out = AdvisoryClient(api_key="k", transport=transport).ask("hello")
    assert out.startswith("Error: NOT-HTTP garbage")
