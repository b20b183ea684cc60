"""
Filesystem adapter — create folders and files under the output root.

Paths go through the sanitizer first, so a traversal attempt becomes a
Failure record instead of a write outside the output root.
"""

from __future__ import annotations

import logging
from pathlib import Path

from codeforge.adapters.base import Adapter, ExecutionContext
from codeforge.core.models.action import (
    ActionFeedback,
    CreateFileAction,
    CreateFolderAction,
)
from codeforge.core.services.paths import PathError, sanitize_path

logger = logging.getLogger(__name__)


class FilesystemAdapter(Adapter):
    """Folder and file creation with feedback records.

    Handles:
        create_folder: mkdir -p under the output root.
        create_file:   create parents, then write (overwrites).
    """

    @property
    def name(self) -> str:
        return "filesystem"

    @property
    def action_types(self) -> tuple[str, ...]:
        return ("create_folder", "create_file")

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not isinstance(context.action, (CreateFolderAction, CreateFileAction)):
            return False, f"Unsupported action type: {context.kind}"
        try:
            self._target(context)
        except PathError as e:
            return False, str(e)
        return True, ""

    def execute(self, context: ExecutionContext) -> ActionFeedback:
        action = context.action
        detail = action.detail

        try:
            target = self._target(context)
        except PathError as e:
            return ActionFeedback.failure(context.kind, detail, str(e))

        if isinstance(action, CreateFolderAction):
            return self._create_folder(context, target)
        if isinstance(action, CreateFileAction):
            return self._create_file(context, target, action.content)
        return ActionFeedback.failure(
            context.kind, detail, f"Unsupported action type: {context.kind}"
        )

    @staticmethod
    def _target(context: ExecutionContext) -> Path:
        """Resolve the action's path under the output root.

        Raises:
            PathError: The path is suspicious.
        """
        return Path(context.output_root) / sanitize_path(context.action.path)

    def _create_folder(self, ctx: ExecutionContext, target: Path) -> ActionFeedback:
        logger.debug("Creating folder: %s", target)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create folder %s: %s", target, e)
            return ActionFeedback.failure(
                ctx.kind, ctx.action.detail, f"Failed to create folder: {e}"
            )

        logger.info("Created folder: %s", target)
        return ActionFeedback.success(
            ctx.kind, ctx.action.detail, f"Created folder: {target}"
        )

    def _create_file(self, ctx: ExecutionContext, target: Path, content: str) -> ActionFeedback:
        logger.debug("Creating file: %s", target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create parent directory %s: %s", target.parent, e)
            return ActionFeedback.failure(
                ctx.kind, ctx.action.detail, f"Failed to create parent directory: {e}"
            )

        try:
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write file %s: %s", target, e)
            return ActionFeedback.failure(
                ctx.kind, ctx.action.detail, f"Failed to write file: {e}"
            )

        logger.info("Created file: %s", target)
        return ActionFeedback.success(
            ctx.kind, ctx.action.detail, f"Created file: {target}"
        )
