"""
Mock adapter — stands in for every adapter when ``chat --mock`` is on.

Acknowledges each action with a Success record and remembers it, so
nothing touches the disk and no process is spawned.
"""

from __future__ import annotations

from codeforge.adapters.base import Adapter, ExecutionContext
from codeforge.core.models.action import ActionFeedback


class MockAdapter(Adapter):
    """Acknowledges every action type without side effects."""

    def __init__(
        self,
        adapter_name: str = "mock",
        action_types: tuple[str, ...] = ("create_folder", "create_file", "execute_command"),
        default_message: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._action_types = action_types
        self._default_message = default_message
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def action_types(self) -> tuple[str, ...]:
        return self._action_types

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> ActionFeedback:
        self._call_log.append(context)
        return ActionFeedback.success(
            action_kind=context.kind,
            action_detail=context.action.detail,
            message=self._default_message,
        )
