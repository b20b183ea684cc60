"""
Tests for the feedback loop — batch serialization and carry-over.
"""

import json

import pytest

from codeforge.core.models import ActionFeedback
from codeforge.core.services import feedback as feedback_mod
from codeforge.core.services.feedback import (
    FeedbackFormatError,
    advance_feedback,
    format_feedback,
)


def _batch() -> list[ActionFeedback]:
    return [
        ActionFeedback.success("create_folder", "path: src", "Created folder: src"),
        ActionFeedback.failure("execute_command", "false", "Command exited with code 1"),
    ]


class TestFormatFeedback:
    def test_json_array_in_order(self):
        data = json.loads(format_feedback(_batch()))
        assert data == [
            {
                "action_kind": "create_folder",
                "action_detail": "path: src",
                "status": "Success",
                "message": "Created folder: src",
            },
            {
                "action_kind": "execute_command",
                "action_detail": "false",
                "status": "Failure",
                "message": "Command exited with code 1",
            },
        ]

    def test_empty_batch(self):
        assert format_feedback([]) == "[]"

    def test_non_ascii_kept(self):
        out = format_feedback([ActionFeedback.success("create_file", "path: é.txt")])
        assert "é.txt" in out

    def test_serialization_failure(self, monkeypatch: pytest.MonkeyPatch):
        def boom(*args, **kwargs):
            raise TypeError("not serializable")

        monkeypatch.setattr(feedback_mod.json, "dumps", boom)
        with pytest.raises(FeedbackFormatError, match="not serializable"):
            format_feedback(_batch())


class TestAdvanceFeedback:
    def test_replaces_previous(self):
        out = advance_feedback("old", _batch())
        assert out != "old"
        assert len(json.loads(out)) == 2

    def test_empty_batch_keeps_previous(self):
        assert advance_feedback("old", []) == "old"

    def test_first_turn_empty(self):
        assert advance_feedback("", []) == ""

    def test_format_failure_keeps_previous(self, monkeypatch: pytest.MonkeyPatch):
        def boom(batch):
            raise FeedbackFormatError("nope")

        monkeypatch.setattr(feedback_mod, "format_feedback", boom)
        assert advance_feedback("old", _batch()) == "old"
