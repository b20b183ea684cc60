"""
File extraction — turn a free-form model reply into (path, content) pairs.

Strategies, in priority order:

    1. MarkdownFileExtractor  fences that carry a filename
                              (```app.py, ```python:app.py, or a
                              "## app.py" header above ```python)
    2. CodeBlockExtractor     any fenced block, named file_<n>.<ext>
    3. raw fallback           the whole reply as README.md

``extract_files`` never fails and never returns an empty list, so a
reply is never silently dropped.
"""

from __future__ import annotations

import logging
import re

from codeforge.core.models.files import ExtractedFile
from codeforge.core.services.extensions import infer_from_language, is_language_tag

logger = logging.getLogger(__name__)

FENCE = "```"
FALLBACK_FILENAME = "README.md"

# "## app.py", "### File: src/app.py", "**File:** app.py", "File: app.py"
_HEADING = re.compile(
    r"^\s*(?:#{1,6}\s+\**(?:(?:file|filename|path)\s*:\s*)?"
    r"|\**(?:file|filename|path)\s*:\s*)"
    r"\**\s*(?P<path>\S+?)\s*$",
    re.IGNORECASE,
)

_CODE_BLOCK = re.compile(r"^```([\w+#-]+)?\s*\n(.*?)^```", re.MULTILINE | re.DOTALL)


def _split_lines(text: str) -> list[str]:
    """Split on newlines, dropping the empty tail after a final newline."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _heading_path(line: str) -> str | None:
    """Return the path named by a markdown heading or ``File:`` line."""
    match = _HEADING.match(line)
    if not match:
        return None
    path = match.group("path").strip("`*'\"").rstrip(":")
    if "." in path or "/" in path:
        return path
    return None


class MarkdownFileExtractor:
    """Primary strategy: fenced blocks that name their file.

    Scans line by line with a single "open file" cursor. A fence with
    a tag opens a file, a bare fence closes it, and a block still open
    at end of input is flushed (truncated replies keep their content).

    A tag made of one word is taken as the filename unless it is a
    known language tag such as ``python``. A language tag only opens a
    file when the heading right above the fence names one.
    """

    def extract(self, text: str) -> list[ExtractedFile]:
        files: list[ExtractedFile] = []
        current: str | None = None
        body: list[str] = []
        in_unnamed_block = False
        heading: str | None = None

        def flush() -> None:
            logger.debug("Extracted file from markdown: %s", current)
            files.append(ExtractedFile(path=current, content="".join(body)))

        for line in _split_lines(text):
            header = line.lstrip("`").strip() if line.startswith(FENCE) else ""

            if header:
                if current is not None:
                    flush()
                current = self._filename_for(header, heading)
                body = []
                in_unnamed_block = current is None
                heading = None
                if current is not None:
                    logger.debug("Found file in markdown: %s", current)
            elif line.strip() == FENCE:
                if current is not None:
                    logger.debug("Completed extraction of file: %s", current)
                    flush()
                    current = None
                else:
                    # opening or closing an unnamed block
                    in_unnamed_block = not in_unnamed_block
                heading = None
            elif current is not None:
                body.append(line + "\n")
            elif not in_unnamed_block and line.strip():
                heading = _heading_path(line)

        if current is not None:
            logger.debug("Extracted file from markdown (unclosed block): %s", current)
            flush()

        logger.info("Extracted %d files from markdown", len(files))
        return files

    @staticmethod
    def _filename_for(header: str, heading: str | None) -> str | None:
        """Resolve the filename a fence header refers to, if any."""
        if ":" in header:
            # language:filename
            return header.split(":", 1)[1].strip() or None
        if len(header.split()) > 1:
            return None
        if is_language_tag(header):
            return heading
        return header


class CodeBlockExtractor:
    """Fallback strategy: every fenced block, with a synthesized name."""

    def extract(self, text: str) -> list[ExtractedFile]:
        files: list[ExtractedFile] = []

        for counter, match in enumerate(_CODE_BLOCK.finditer(text), start=1):
            language = match.group(1) or "txt"
            filename = f"file_{counter}.{infer_from_language(language)}"
            logger.debug("Extracted code block: %s (language: %s)", filename, language)
            files.append(ExtractedFile(path=filename, content=match.group(2)))

        logger.info("Extracted %d files from code blocks", len(files))
        return files


def extract_files(text: str) -> list[ExtractedFile]:
    """Extract files from a model reply, falling back until something sticks."""
    files = MarkdownFileExtractor().extract(text)

    if not files:
        logger.debug("No files found using markdown pattern, trying code blocks extraction")
        files = CodeBlockExtractor().extract(text)

    if not files:
        logger.warning(
            "No files found in structured format, treating entire response as %s",
            FALLBACK_FILENAME,
        )
        files = [ExtractedFile(path=FALLBACK_FILENAME, content=text)]

    return files
