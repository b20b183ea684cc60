"""
Chat use case — one conversation turn with the action feedback loop.

Turn phases:

    IDLE → AWAITING_MODEL_RESPONSE → PARSING_RESPONSE
         → EXECUTING_ACTIONS → FORMATTING_FEEDBACK → IDLE
         → MATERIALIZING_FILES → IDLE            (reply wasn't an action document)

The feedback string travels in a ChatState value: the caller passes
the previous state in and gets the next one back on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

from codeforge.core.clients.gemini import GeminiApiError, GeminiClient
from codeforge.core.clients.prompts import system_info
from codeforge.core.config.loader import ConfigError
from codeforge.core.engine.executor import ActionExecutor, ExecutionReport
from codeforge.core.models.action import ActionFeedback, CreateFileAction
from codeforge.core.models.response import ResponseError, extract_text
from codeforge.core.services.action_parser import ActionParseError, parse_action_response
from codeforge.core.services.extraction import extract_files
from codeforge.core.services.feedback import advance_feedback
from codeforge.core.services.materializer import (
    MaterializationError,
    create_files_from_response,
)

logger = logging.getLogger(__name__)


class TurnPhase(StrEnum):
    IDLE = "idle"
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"
    PARSING_RESPONSE = "parsing_response"
    EXECUTING_ACTIONS = "executing_actions"
    FORMATTING_FEEDBACK = "formatting_feedback"
    MATERIALIZING_FILES = "materializing_files"


@dataclass(frozen=True)
class ChatState:
    """What one turn hands to the next."""

    feedback: str = ""
    turns: int = 0


@dataclass
class ChatTurnResult:
    """Result of one chat turn."""

    state: ChatState = field(default_factory=ChatState)
    user_message: str = ""
    report: ExecutionReport | None = None
    created_files: list[str] = field(default_factory=list)
    last_phase: TurnPhase = TurnPhase.IDLE
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        """Whether the reply was materialized as files instead of actions."""
        return self.last_phase == TurnPhase.MATERIALIZING_FILES

    def to_dict(self) -> dict:
        result: dict = {"phase": self.last_phase.value}
        if self.error:
            result["error"] = self.error
            return result

        result["user_message"] = self.user_message
        result["feedback"] = self.state.feedback
        if self.created_files:
            result["created_files"] = self.created_files
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_chat_turn(
    query: str,
    state: ChatState,
    client: GeminiClient,
    output_root: str | Path = ".",
    executor: ActionExecutor | None = None,
    system: str | None = None,
) -> ChatTurnResult:
    """Run one chat turn: ask, parse, act, and fold outcomes into feedback.

    Args:
        query: The operator's request.
        state: State carried over from the previous turn.
        client: Gemini client (anything with a compatible ``chat``).
        output_root: Directory actions and files are resolved against.
        executor: Action executor (default: filesystem + shell adapters).
        system: System description for the prompt (default: this host).

    Returns:
        ChatTurnResult. On error, ``state`` is the unchanged input state.
    """
    result = ChatTurnResult(state=state)
    if executor is None:
        executor = ActionExecutor()
    logger.info("User Query: %r", query)

    # ── Ask ──────────────────────────────────────────────────────
    result.last_phase = TurnPhase.AWAITING_MODEL_RESPONSE
    try:
        response = client.chat(query, system or system_info(), state.feedback)
    except (ConfigError, GeminiApiError) as e:
        result.error = str(e)
        return result

    # ── Parse ────────────────────────────────────────────────────
    result.last_phase = TurnPhase.PARSING_RESPONSE
    try:
        text = extract_text(response, first_text_only=True)
    except ResponseError as e:
        result.error = str(e)
        return result

    logger.debug("Received text content: %s", text)

    try:
        action_response = parse_action_response(text)
    except ActionParseError as e:
        logger.warning("Failed to parse response as JSON: %s", e)
        return _materialize_reply(result, text, output_root, executor)

    # ── Act ──────────────────────────────────────────────────────
    result.last_phase = TurnPhase.EXECUTING_ACTIONS
    report = executor.execute_batch(action_response.commands, output_root)
    result.report = report
    result.user_message = action_response.user_message

    # ── Feed back ────────────────────────────────────────────────
    result.last_phase = TurnPhase.FORMATTING_FEEDBACK
    result.state = ChatState(
        feedback=advance_feedback(state.feedback, report.feedback),
        turns=state.turns + 1,
    )
    logger.info("User message: %s", result.user_message)
    return result


def _materialize_reply(
    result: ChatTurnResult,
    text: str,
    output_root: str | Path,
    executor: ActionExecutor,
) -> ChatTurnResult:
    """Fallback branch: write the reply's files and report each as created.

    In mock mode the extracted files go to the mock adapter as
    create_file actions instead, and nothing is written.
    """
    result.last_phase = TurnPhase.MATERIALIZING_FILES
    logger.debug("Attempting to extract files from markdown response")

    if executor.registry.mock_mode:
        actions = [CreateFileAction(path=f.path, content=f.content) for f in extract_files(text)]
        result.report = executor.execute_batch(actions, output_root)
    else:
        try:
            created = create_files_from_response(text, output_root)
        except MaterializationError as e:
            logger.error("Failed to create files from response: %s", e)
            result.error = f"Error creating files: {e}"
            return result

        logger.info("Created %d files from markdown response", len(created))
        result.created_files = created
        result.report = ExecutionReport(feedback=[
            ActionFeedback.success("create_file", f"path: {path}", f"Created file: {path}")
            for path in created
        ])

    batch = result.report.feedback
    result.state = replace(
        result.state,
        feedback=advance_feedback(result.state.feedback, batch),
        turns=result.state.turns + 1,
    )
    return result
