"""
Gemini response envelope — candidates, content parts, prompt feedback.

The API returns content as a list of untyped "parts". Each part is
coerced into one closed variant before validation:

    TextPart                 {"text": ...}
    ExecutableCodePart       {"executableCode": {"language", "code"}}
    CodeExecutionResultPart  {"codeExecutionResult": {"outcome", "output"}}
    UnknownPart              anything else (kept, never fatal)

Pure Pydantic models with no I/O.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ResponseError(Exception):
    """Raised when a model reply carries no usable content."""


class _ApiModel(BaseModel):
    """Accepts both the API's camelCase keys and snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Parts ───────────────────────────────────────────────────────


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""


class ExecutableCodePart(BaseModel):
    kind: Literal["executable_code"] = "executable_code"
    language: str = ""
    code: str = ""


class CodeExecutionResultPart(BaseModel):
    kind: Literal["code_execution_result"] = "code_execution_result"
    outcome: str = ""
    output: str = ""


class UnknownPart(BaseModel):
    """A part shape we don't recognize. Kept for forward compatibility."""

    kind: Literal["unknown"] = "unknown"
    raw: dict[str, Any] = Field(default_factory=dict)


Part = Annotated[
    Union[TextPart, ExecutableCodePart, CodeExecutionResultPart, UnknownPart],
    Field(discriminator="kind"),
]


def _lookup(raw: dict[str, Any], snake: str) -> Any:
    """Fetch a key by its snake_case or camelCase name."""
    if snake in raw:
        return raw[snake]
    return raw.get(to_camel(snake))


def coerce_part(raw: Any) -> Any:
    """Map one raw API part onto a tagged variant dict."""
    if isinstance(raw, BaseModel):
        return raw
    if not isinstance(raw, dict):
        return {"kind": "unknown", "raw": {"value": raw}}

    code = _lookup(raw, "executable_code")
    if isinstance(code, dict):
        return {
            "kind": "executable_code",
            "language": str(code.get("language", "")),
            "code": str(code.get("code", "")),
        }

    result = _lookup(raw, "code_execution_result")
    if isinstance(result, dict):
        return {
            "kind": "code_execution_result",
            "outcome": str(result.get("outcome", "")),
            "output": str(result.get("output", "")),
        }

    if isinstance(raw.get("text"), str):
        return {"kind": "text", "text": raw["text"]}

    return {"kind": "unknown", "raw": raw}


# ── Envelope ────────────────────────────────────────────────────


class Content(_ApiModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def _coerce_parts(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [coerce_part(p) for p in value]


class SafetyRating(_ApiModel):
    category: str = ""
    probability: str = ""


class Candidate(_ApiModel):
    content: Content = Field(default_factory=Content)
    finish_reason: str | None = None
    index: int | None = None
    safety_ratings: list[SafetyRating] | None = None


class PromptFeedback(_ApiModel):
    block_reason: str | None = None
    safety_ratings: list[SafetyRating] | None = None


class GeminiApiResponse(_ApiModel):
    candidates: list[Candidate] | None = None
    prompt_feedback: PromptFeedback | None = None


# ── Text extraction ─────────────────────────────────────────────


def first_candidate(response: GeminiApiResponse) -> Candidate:
    """Return the first candidate, or raise with the block reason if any.

    Raises:
        ResponseError: If the prompt was blocked or no candidate came back.
    """
    if response.prompt_feedback and response.prompt_feedback.block_reason:
        reason = response.prompt_feedback.block_reason
        logger.error("Response was blocked: %s", reason)
        raise ResponseError(f"Response was blocked: {reason}")

    if not response.candidates:
        logger.warning("No candidates in response")
        raise ResponseError("No candidates in response")

    candidate = response.candidates[0]
    if candidate.finish_reason and candidate.finish_reason != "STOP":
        logger.warning("Response was cut off: %s", candidate.finish_reason)
    return candidate


def render_part(part: Part) -> str:
    """Render one part as the text the extractors consume."""
    if isinstance(part, TextPart):
        return part.text
    if isinstance(part, ExecutableCodePart):
        return f"```{part.language.lower()}\n{part.code}\n```\n"
    if isinstance(part, CodeExecutionResultPart):
        return f"Execution result: {part.outcome}\nOutput: {part.output}\n"
    text = part.raw.get("text")
    return text if isinstance(text, str) else ""


def extract_text(response: GeminiApiResponse, first_text_only: bool = False) -> str:
    """Flatten the first candidate's parts into one string.

    Args:
        response: Parsed API response.
        first_text_only: Return only the first text part (chat mode,
            where the reply must be a single JSON document).

    Raises:
        ResponseError: Blocked prompt, no candidates, or no text at all.
    """
    candidate = first_candidate(response)

    if first_text_only:
        result = next(
            (p.text for p in candidate.content.parts if isinstance(p, TextPart)),
            "",
        )
    else:
        result = ""
        for part in candidate.content.parts:
            if isinstance(part, UnknownPart):
                logger.debug("Skipping unrecognized part: %s", sorted(part.raw))
            result += render_part(part)

    if not result:
        logger.warning("Empty response from Gemini")
        raise ResponseError("Empty response from Gemini")

    logger.debug("Extracted text from response: %d characters", len(result))
    return result
