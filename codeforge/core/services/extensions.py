"""
Extension inference — from a fence's language tag or from file content.

Both functions are total: when nothing matches they fall back to ``txt``.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "txt"

LANGUAGE_EXTENSIONS: dict[str, str] = {
    "python": "py",
    "py": "py",
    "javascript": "js",
    "js": "js",
    "typescript": "ts",
    "ts": "ts",
    "jsx": "jsx",
    "tsx": "tsx",
    "html": "html",
    "css": "css",
    "rust": "rs",
    "rs": "rs",
    "go": "go",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "csharp": "cs",
    "cs": "cs",
    "php": "php",
    "ruby": "rb",
    "rb": "rb",
    "shell": "sh",
    "sh": "sh",
    "bash": "sh",
    "sql": "sql",
    "json": "json",
    "yaml": "yml",
    "yml": "yml",
    "markdown": "md",
    "md": "md",
    "dockerfile": "Dockerfile",
    "makefile": "Makefile",
}

# Tags that name a file rather than a language when used alone on a fence.
_FILENAME_TAGS = frozenset({"dockerfile", "makefile"})


def infer_from_language(name: str) -> str:
    """Map a language name (case-insensitive) to a file extension."""
    return LANGUAGE_EXTENSIONS.get(name.strip().lower(), DEFAULT_EXTENSION)


def is_language_tag(word: str) -> bool:
    """Whether a bare fence word is a known language rather than a filename."""
    key = word.strip().lower()
    return key in LANGUAGE_EXTENSIONS and key not in _FILENAME_TAGS


# Ordered: the first matching rule wins, and several signals overlap
# (a React component also satisfies the generic ES-module rule).
_CONTENT_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...], str], ...] = (
    # (any of, all of, extension)
    (("<?php",), (), "php"),
    (("<!DOCTYPE html", "<html"), (), "html"),
    (("import React", "from 'react'"), (), "jsx"),
    ((), ("import ", "from '", "export "), "js"),
    ((), ("#include <", "iostream"), "cpp"),
    ((), ("#include <",), "c"),
    ((), ("package ", "import ", "public class "), "java"),
    ((), ("def ", "import "), "py"),
    ((), ("fn ", "pub ", "use "), "rs"),
)


def infer_from_content(body: str) -> str:
    """Guess an extension from substring heuristics.

    Best effort: ambiguous content may be misclassified.
    """
    for any_of, all_of, extension in _CONTENT_RULES:
        if any_of and not any(marker in body for marker in any_of):
            continue
        if all(marker in body for marker in all_of):
            return extension

    logger.debug("Could not infer extension from content, defaulting to %s", DEFAULT_EXTENSION)
    return DEFAULT_EXTENSION
