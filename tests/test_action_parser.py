"""
Tests for the chat-mode action parser.
"""

import pytest

from codeforge.core.models import CreateFileAction, ExecuteCommandAction
from codeforge.core.services.action_parser import ActionParseError, parse_action_response

_DOC = '{"commands": [{"type": "execute_command", "command": "ls", "args": ["-la"]}], "user_message": "Listing"}'


class TestParseActionResponse:
    def test_bare_json(self):
        response = parse_action_response(_DOC)
        assert response.commands == [ExecuteCommandAction(command="ls", args=["-la"])]
        assert response.user_message == "Listing"

    def test_json_fence(self):
        response = parse_action_response(f"Sure!\n```json\n{_DOC}\n```\nAnything else?")
        assert response.user_message == "Listing"

    def test_bare_fence(self):
        assert parse_action_response(f"```\n{_DOC}\n```").user_message == "Listing"

    def test_prose_around_object(self):
        response = parse_action_response(f"Here is the plan: {_DOC} Hope that helps.")
        assert len(response.commands) == 1

    def test_braces_in_content(self):
        doc = '{"commands": [{"type": "create_file", "path": "a.js", "content": "function f() { return {}; }"}]}'
        response = parse_action_response(doc)
        assert response.commands == [
            CreateFileAction(path="a.js", content="function f() { return {}; }")
        ]

    def test_empty_commands(self):
        response = parse_action_response('{"commands": [], "user_message": "Nothing to do"}')
        assert response.commands == []

    def test_user_message_optional(self):
        assert parse_action_response('{"commands": []}').user_message == ""


class TestParseErrors:
    def test_plain_prose(self):
        with pytest.raises(ActionParseError, match="No JSON object"):
            parse_action_response("I'd be happy to help with that.")

    def test_markdown_reply(self):
        with pytest.raises(ActionParseError):
            parse_action_response("## app.py\n```python\nprint(1)\n```")

    def test_array_is_not_a_document(self):
        with pytest.raises(ActionParseError):
            parse_action_response("[1, 2, 3]")

    def test_missing_commands(self):
        with pytest.raises(ActionParseError, match="no 'commands'"):
            parse_action_response('{"user_message": "hi"}')

    def test_unknown_action_type(self):
        with pytest.raises(ActionParseError, match="Invalid action document"):
            parse_action_response('{"commands": [{"type": "reboot"}]}')

    def test_missing_required_field(self):
        with pytest.raises(ActionParseError):
            parse_action_response('{"commands": [{"type": "create_folder"}]}')
