"""
Adapter registry — central dispatch for all action kinds.

The registry maps each action type to the adapter that handles it.
The executor never talks to adapters directly — always through here.
"""

from __future__ import annotations

import logging
import time

from codeforge.adapters.base import Adapter, ExecutionContext
from codeforge.adapters.mock import MockAdapter
from codeforge.core.models.action import Action, ActionFeedback

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Routes each action type to the one adapter that handles it.

    In mock mode every action goes to a single mock adapter instead,
    and nothing touches the disk.
    """

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._routes: dict[str, str] = {}
        self._mock_adapter: Adapter | None = None
        self.set_mock_mode(mock_mode)

    @property
    def mock_mode(self) -> bool:
        return self._mock_adapter is not None

    @property
    def mock_adapter(self) -> Adapter | None:
        """The adapter receiving every action in mock mode."""
        return self._mock_adapter

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        """Toggle mock mode, routing every action to ``mock_adapter`` (default: MockAdapter)."""
        if not enabled:
            self._mock_adapter = None
            return
        self._mock_adapter = mock_adapter if mock_adapter is not None else MockAdapter()
        logger.debug("Mock mode on: %s", self._mock_adapter.name)

    def register(self, adapter: Adapter) -> None:
        """Register an adapter for every action type it handles."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        for action_type in adapter.action_types:
            self._routes[action_type] = name
        logger.debug("Registered adapter: %s (%s)", name, ", ".join(adapter.action_types))

    def adapter_for(self, action_type: str) -> Adapter | None:
        """Look up the adapter that handles an action type."""
        if self._mock_adapter is not None:
            return self._mock_adapter
        name = self._routes.get(action_type)
        return self._adapters.get(name) if name else None

    def execute_action(self, action: Action, output_root: str = ".") -> ActionFeedback:
        """Execute an action through the adapter that handles its type.

        Missing adapters, failed validation and adapter exceptions all
        come back as Failure records; this method never raises.
        """
        start_time = time.monotonic()
        context = ExecutionContext(action=action, output_root=output_root)

        adapter = self.adapter_for(action.type)
        if adapter is None:
            return ActionFeedback.failure(
                action_kind=action.type,
                action_detail=action.detail,
                message=f"No adapter registered for '{action.type}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return ActionFeedback.failure(
                action_kind=action.type,
                action_detail=action.detail,
                message=f"Validation error: {e}",
            )
        if not is_valid:
            return ActionFeedback.failure(
                action_kind=action.type,
                action_detail=action.detail,
                message=f"Validation failed: {error_msg}",
            )

        try:
            feedback = adapter.execute(context)
        except Exception as e:
            # adapters should never raise
            logger.error("Adapter %s raised during execution: %s", adapter.name, e)
            feedback = ActionFeedback.failure(
                action_kind=action.type,
                action_detail=action.detail,
                message=f"Unexpected error: {e}",
            )

        feedback.duration_ms = int((time.monotonic() - start_time) * 1000)
        return feedback


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the filesystem and shell adapters registered."""
    from codeforge.adapters.shell.command import ShellCommandAdapter
    from codeforge.adapters.shell.filesystem import FilesystemAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(FilesystemAdapter())
    registry.register(ShellCommandAdapter())
    return registry
