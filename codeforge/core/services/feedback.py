"""
Feedback loop — serialize a turn's action outcomes for the next turn.

The serialized batch is embedded verbatim in the next chat prompt so
the model can correct failed actions. A batch holds exactly one record
per action of the prior turn, in issue order.
"""

from __future__ import annotations

import json
import logging

from pydantic_core import PydanticSerializationError

from codeforge.core.models.action import ActionFeedback

logger = logging.getLogger(__name__)


class FeedbackFormatError(Exception):
    """Raised when a feedback batch cannot be serialized."""


def format_feedback(batch: list[ActionFeedback]) -> str:
    """Serialize a batch as a JSON array of feedback records.

    Raises:
        FeedbackFormatError: A record could not be serialized.
    """
    try:
        payload = [record.model_dump(mode="json") for record in batch]
        formatted = json.dumps(payload, ensure_ascii=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error("Failed to format feedback as JSON: %s", e)
        raise FeedbackFormatError(str(e)) from e

    logger.debug("Formatted feedback as JSON: %s", formatted)
    return formatted


def advance_feedback(previous: str, batch: list[ActionFeedback]) -> str:
    """Return the feedback string to carry into the next turn.

    The previous string is kept when the batch is empty or cannot be
    formatted, so context from the last successful turn is never lost.
    """
    if not batch:
        return previous

    try:
        return format_feedback(batch)
    except FeedbackFormatError as e:
        logger.warning("Failed to format feedback, keeping previous: %s", e)
        return previous
