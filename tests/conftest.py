"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from typing import Callable

import pytest

from codeforge.core.config.loader import Settings
from codeforge.core.models.response import GeminiApiResponse


def make_reply(*parts: dict, finish_reason: str = "STOP") -> GeminiApiResponse:
    """Build an API response whose first candidate carries the given parts."""
    return GeminiApiResponse.model_validate(
        {
            "candidates": [
                {
                    "content": {"role": "model", "parts": list(parts)},
                    "finishReason": finish_reason,
                }
            ]
        }
    )


class FakeGeminiClient:
    """Stands in for GeminiClient: replays canned replies, records calls."""

    def __init__(self, replies: list[GeminiApiResponse] | None = None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: list[tuple[str, tuple]] = []
        self.settings = Settings(api_key="test-key")

    def _next(self, mode: str, *args) -> GeminiApiResponse:
        self.calls.append((mode, args))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)

    def chat(self, query: str, system: str, feedback: str = "") -> GeminiApiResponse:
        return self._next("chat", query, system, feedback)

    def execute(self, query: str) -> GeminiApiResponse:
        return self._next("execute", query)

    def create_codebase(self, description: str) -> GeminiApiResponse:
        return self._next("create_codebase", description)


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Return an empty output directory."""
    root = tmp_path / "out"
    root.mkdir()
    return root


@pytest.fixture
def api_reply() -> Callable[..., GeminiApiResponse]:
    """Factory: a reply built from raw API parts."""
    return make_reply


@pytest.fixture
def text_reply() -> Callable[[str], GeminiApiResponse]:
    """Factory: a reply with a single text part."""
    return lambda text: make_reply({"text": text})


@pytest.fixture
def fake_client() -> Callable[..., FakeGeminiClient]:
    """Factory for a fake Gemini client."""
    return FakeGeminiClient
