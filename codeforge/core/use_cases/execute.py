"""
Execute use case — let the model write and run code on its side.

Nothing touches the local disk here. The reply's parts (prose,
generated code, execution results) are returned for display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from codeforge.core.clients.gemini import GeminiApiError, GeminiClient
from codeforge.core.config.loader import ConfigError
from codeforge.core.models.response import (
    CodeExecutionResultPart,
    ExecutableCodePart,
    Part,
    ResponseError,
    TextPart,
    first_candidate,
)

logger = logging.getLogger(__name__)


@dataclass
class ExecuteResult:
    """Result of a code-execution request."""

    parts: list[Part] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {"parts": [p.model_dump(mode="json") for p in self.parts]}


def run_execute(query: str, client: GeminiClient) -> ExecuteResult:
    """Send a code-execution request and collect the reply's parts."""
    result = ExecuteResult()
    logger.info("User Query for Code Execution: %r", query)

    try:
        response = client.execute(query)
        candidate = first_candidate(response)
    except (ConfigError, GeminiApiError, ResponseError) as e:
        result.error = str(e)
        return result

    for part in candidate.content.parts:
        if isinstance(part, TextPart) and not part.text:
            continue
        if isinstance(part, ExecutableCodePart):
            logger.debug("Found executable code in response: %s", part.language)
        elif isinstance(part, CodeExecutionResultPart):
            logger.debug("Found code execution result in response: %s", part.outcome)
        result.parts.append(part)

    return result
