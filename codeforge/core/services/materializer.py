"""
File materializer — write extracted files under the output root.

Writes are not transactional: when a later file fails, files written
earlier in the same batch stay on disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

from codeforge.core.models.files import ExtractedFile
from codeforge.core.services.extensions import infer_from_content
from codeforge.core.services.extraction import extract_files
from codeforge.core.services.paths import PathError, sanitize_path

logger = logging.getLogger(__name__)


class MaterializationError(Exception):
    """Raised when a batch of extracted files cannot be written."""


def resolve_relative_path(file: ExtractedFile) -> str:
    """Sanitize a file's path and give it an extension if it has none.

    Raises:
        PathError: The path is suspicious.
    """
    clean_path = sanitize_path(file.path)
    if "." not in clean_path:
        clean_path = f"{clean_path}.{infer_from_content(file.content)}"
    return clean_path


def materialize(files: list[ExtractedFile], output_root: str | Path) -> list[str]:
    """Write every file under ``output_root``, in order.

    Args:
        files: Files produced by the extractors.
        output_root: Directory all paths are resolved against.

    Returns:
        The written paths, as ``output_root / relative_path`` strings.

    Raises:
        MaterializationError: A path was rejected or a write failed.
            Aborts the remaining files in the batch.
    """
    root = Path(output_root)
    created: list[str] = []

    for file in files:
        try:
            relative = resolve_relative_path(file)
        except PathError as e:
            raise MaterializationError(str(e)) from e

        full_path = root / relative
        try:
            logger.debug("Creating parent directory: %s", full_path.parent)
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(file.content, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise MaterializationError(f"Cannot write {full_path}: {e}") from e

        logger.info("Created file: %s", full_path)
        created.append(str(full_path))

    logger.info("Successfully created %d files", len(created))
    return created


def create_files_from_response(text: str, output_root: str | Path) -> list[str]:
    """Extract files from a model reply and write them to disk.

    The output root is created first if it does not exist.

    Raises:
        MaterializationError: See :func:`materialize`.
    """
    root = Path(output_root)
    try:
        root.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as e:
        raise MaterializationError(f"Cannot create output directory {root}: {e}") from e

    return materialize(extract_files(text), root)
