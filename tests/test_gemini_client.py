"""
Tests for the Gemini client and prompt builders (no network).
"""

import io
import json
import urllib.error
import urllib.request

import pytest

from codeforge.core.clients.gemini import GeminiApiError, GeminiClient
from codeforge.core.clients.prompts import (
    CHAT_INSTRUCTIONS,
    chat_prompt,
    codebase_prompt,
    system_info,
)
from codeforge.core.config.loader import ConfigError, Settings

_OK_BODY = json.dumps({
    "candidates": [{"content": {"parts": [{"text": "hi"}]}, "finishReason": "STOP"}]
})


class _FakeResponse:
    def __init__(self, body: str, status: int = 200):
        self.status = status
        self._body = body.encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list:
    """Patch urlopen to record requests and answer with a canned body."""
    requests: list = []

    def fake_urlopen(req, timeout=None):
        requests.append((req, timeout))
        return _FakeResponse(_OK_BODY)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return requests


def _client(**overrides) -> GeminiClient:
    return GeminiClient(Settings(api_key="k3y", **overrides))


def _payload(req) -> dict:
    return json.loads(req.data.decode("utf-8"))


# ── Requests ────────────────────────────────────────────────────────


class TestRequests:
    def test_chat_request(self, captured: list):
        response = _client().chat("make a file", "OS: linux", '[{"status": "Success"}]')

        req, timeout = captured[0]
        assert req.get_method() == "POST"
        assert req.full_url.endswith(":generateContent?key=k3y")
        assert req.get_header("Content-type") == "application/json"
        assert timeout == 120.0

        body = _payload(req)
        assert "tools" not in body
        prompt = body["contents"][0]["parts"][0]["text"]
        assert "make a file" in prompt
        assert '[{"status": "Success"}]' in prompt
        assert response.candidates[0].content.parts[0].text == "hi"

    def test_execute_request_enables_code_execution(self, captured: list):
        _client().execute("compute 2+2")
        body = _payload(captured[0][0])
        assert body["tools"] == [{"code_execution": {}}]
        assert body["contents"][0]["role"] == "user"
        assert body["contents"][0]["parts"][0]["text"] == "compute 2+2"

    def test_create_codebase_request(self, captured: list):
        _client().create_codebase("a todo app")
        body = _payload(captured[0][0])
        assert body["tools"] == [{"code_execution": {}}]
        assert "a todo app" in body["contents"][0]["parts"][0]["text"]

    def test_custom_endpoint_with_query(self, captured: list):
        _client(api_endpoint="http://localhost:8080/gen?alt=json").chat("q", "s")
        assert captured[0][0].full_url == "http://localhost:8080/gen?alt=json&key=k3y"

    def test_custom_timeout(self, captured: list):
        _client(request_timeout=5).chat("q", "s")
        assert captured[0][1] == 5.0

    def test_missing_key(self, captured: list):
        with pytest.raises(ConfigError):
            GeminiClient(Settings()).chat("q", "s")
        assert captured == []


# ── Errors ──────────────────────────────────────────────────────────


class TestErrors:
    def test_http_error(self, monkeypatch: pytest.MonkeyPatch):
        def fail(req, timeout=None):
            raise urllib.error.HTTPError(
                req.full_url, 400, "Bad Request", {}, io.BytesIO(b'{"error": "bad key"}')
            )

        monkeypatch.setattr(urllib.request, "urlopen", fail)
        with pytest.raises(GeminiApiError, match='status 400: {"error": "bad key"}'):
            _client().chat("q", "s")

    def test_network_error(self, monkeypatch: pytest.MonkeyPatch):
        def fail(req, timeout=None):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(urllib.request, "urlopen", fail)
        with pytest.raises(GeminiApiError, match="Error communicating with Gemini API: connection refused"):
            _client().execute("q")

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch):
        def fail(req, timeout=None):
            raise TimeoutError("timed out")

        monkeypatch.setattr(urllib.request, "urlopen", fail)
        with pytest.raises(GeminiApiError, match="timed out"):
            _client().execute("q")

    def test_unparseable_body(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, timeout=None: _FakeResponse("<html>"))
        with pytest.raises(GeminiApiError, match="Failed to parse API response"):
            _client().create_codebase("x")


# ── Prompts ─────────────────────────────────────────────────────────


class TestPrompts:
    def test_chat_prompt_sections(self):
        prompt = chat_prompt("list files", "OS: linux", "[]")
        assert prompt.startswith(CHAT_INSTRUCTIONS)
        assert "System Information:\nOS: linux" in prompt
        assert "Previous Command Feedback (if any):\n[]" in prompt
        assert prompt.endswith("User Query:\nlist files")

    def test_chat_instructions_document_schema(self):
        for kind in ("create_folder", "create_file", "execute_command"):
            assert kind in CHAT_INSTRUCTIONS
        assert "user_message" in CHAT_INSTRUCTIONS

    def test_codebase_prompt(self):
        prompt = codebase_prompt("a flask blog")
        assert prompt.startswith("Create a complete codebase based on this description: a flask blog")
        assert "## app.py" in prompt

    def test_system_info(self):
        info = system_info()
        assert info.startswith("OS: ")
        assert "\nArch: " in info
        assert "\nDir: " in info
