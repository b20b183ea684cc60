"""
Action parser — pull a chat-mode ActionResponse out of a model reply.

Models don't always answer with bare JSON. They wrap it in a ```json
fence or surround it with prose. Strategies, in order:

    1. the whole reply is the JSON object
    2. the first ```json (or bare ```) fenced block holding an object
    3. the span from the first "{" to the last "}"
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from codeforge.core.models.action import ActionResponse

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


class ActionParseError(Exception):
    """Raised when a reply holds no valid action document."""


def _candidates(text: str) -> list[str]:
    stripped = text.strip()
    found = [stripped]

    fenced = _JSON_FENCE.search(stripped)
    if fenced:
        found.append(fenced.group(1))

    start, end = stripped.find("{"), stripped.rfind("}")
    if start != -1 and end > start:
        found.append(stripped[start:end + 1])

    return found


def _load_object(text: str) -> dict[str, Any]:
    last_error: Exception | None = None
    for candidate in _candidates(text):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(data, dict):
            return data
        last_error = ValueError(f"expected a JSON object, got {type(data).__name__}")

    raise ActionParseError(f"No JSON object found in response: {last_error}")


def parse_action_response(text: str) -> ActionResponse:
    """Parse the action document in a chat-mode reply.

    Raises:
        ActionParseError: No JSON object, or one that doesn't match the
            ``{"commands": [...], "user_message": ...}`` schema.
    """
    data = _load_object(text)

    if "commands" not in data:
        raise ActionParseError("Response JSON has no 'commands' field")

    try:
        response = ActionResponse.model_validate(data)
    except ValidationError as e:
        raise ActionParseError(f"Invalid action document: {e}") from e

    logger.info("Successfully parsed JSON response with %d commands", len(response.commands))
    return response
