"""
Shell command adapter — run the programs the model asks for.

The command line is split into a program and an argument vector and
spawned directly (no shell). The call blocks until the child exits;
there is no timeout. The child inherits our working directory and
environment.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time

from codeforge.adapters.base import Adapter, ExecutionContext
from codeforge.core.models.action import ActionFeedback, ExecuteCommandAction

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute ``execute_command`` actions and capture their output.

    Exit code 0 reports stdout as the message. Anything else reports
    stderr (or the exit code when stderr is empty).
    """

    @property
    def name(self) -> str:
        return "shell"

    @property
    def action_types(self) -> tuple[str, ...]:
        return ("execute_command",)

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not isinstance(context.action, ExecuteCommandAction):
            return False, f"Unsupported action type: {context.kind}"
        return True, ""

    def execute(self, context: ExecutionContext) -> ActionFeedback:
        action = context.action
        assert isinstance(action, ExecuteCommandAction)
        detail = action.command_line

        try:
            argv = shlex.split(action.command) + list(action.args)
        except ValueError as e:
            return ActionFeedback.failure(
                context.kind, detail, f"Cannot parse command: {e}"
            )

        if not argv:
            logger.error("Empty command provided")
            return ActionFeedback.failure(context.kind, detail, "Empty command")

        logger.debug("Executing command: %s with args: %s", argv[0], argv[1:])
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.error("Failed to execute command: %s", e)
            return ActionFeedback.failure(
                context.kind, detail, f"Failed to execute command: {e}"
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            logger.debug("Command executed successfully")
            return ActionFeedback.success(
                context.kind, detail, output, duration_ms=elapsed_ms
            )

        logger.error("Command execution failed: %s", stderr)
        return ActionFeedback.failure(
            context.kind,
            detail,
            stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
        )
