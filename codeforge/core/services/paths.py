"""
Path sanitizer — the boundary between model-supplied paths and the disk.

Every path the model hands us is relative to the output root. Anything
that could climb out of it, or that the OS cannot name, is refused
before a single byte is written.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# C:\ or C:/ style roots
_DRIVE_ROOT = re.compile(r"^[A-Za-z]:[\\/]")

# NUL and the other C0 controls, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class PathError(Exception):
    """Raised when a model-supplied path cannot be used."""


class SuspiciousPathError(PathError):
    """Path would escape the output root, or is not a usable file name."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Suspicious file path: {raw}")


def sanitize_path(raw: str) -> str:
    """Validate and normalize a relative path.

    Args:
        raw: Path as it appeared in the model reply.

    Returns:
        The trimmed path with forward slashes.

    Raises:
        SuspiciousPathError: Path contains the substring ``..`` anywhere
            (so ``notes..md`` is refused too), is rooted, is empty, or
            holds control characters such as NUL.
    """
    path = raw.strip()

    if (
        not path
        or ".." in path
        or path.startswith(("/", "\\"))
        or _DRIVE_ROOT.match(path)
        or _CONTROL_CHARS.search(path)
    ):
        logger.warning("Suspicious file path detected: %r", raw)
        raise SuspiciousPathError(raw)

    normalized = path.replace("\\", "/")
    logger.debug("Normalized file path: %s -> %s", path, normalized)
    return normalized
