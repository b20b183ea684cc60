"""
Create-codebase use case — generation mode, end to end.

description → Gemini → markdown reply → extracted files → disk
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from codeforge.core.clients.gemini import GeminiApiError, GeminiClient
from codeforge.core.config.loader import ConfigError
from codeforge.core.models.response import ResponseError, extract_text
from codeforge.core.services.materializer import (
    MaterializationError,
    create_files_from_response,
)

logger = logging.getLogger(__name__)


@dataclass
class CodebaseResult:
    """Result of generating a codebase."""

    output_dir: str = "."
    created_files: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "output_dir": self.output_dir,
            "total": len(self.created_files),
            "created_files": self.created_files,
        }


def run_create_codebase(
    description: str,
    client: GeminiClient,
    output_dir: str | Path = ".",
) -> CodebaseResult:
    """Ask for a codebase and write every file the reply contains.

    Any reply produces at least one file: when nothing looks like a
    file, the whole reply lands in README.md.
    """
    result = CodebaseResult(output_dir=str(output_dir))
    logger.info("Creating codebase with description: %r", description)
    logger.info("Output directory: %r", str(output_dir))

    try:
        response = client.create_codebase(description)
        text = extract_text(response)
    except (ConfigError, GeminiApiError, ResponseError) as e:
        result.error = str(e)
        return result

    try:
        result.created_files = create_files_from_response(text, output_dir)
    except MaterializationError as e:
        result.error = f"Error creating files: {e}"
        return result

    logger.info("Created %d files in %s", len(result.created_files), output_dir)
    return result
