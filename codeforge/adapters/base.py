"""
Adapter base — the protocol contract between executor and side effects.

Every action kind the model can emit is handled by exactly one
adapter. The executor only talks to adapters through this protocol.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from codeforge.core.models.action import Action, ActionFeedback


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action.

    This is the adapter's view of the world: the action to perform
    and the output root all paths are resolved against.
    """

    action: Action
    output_root: str = "."

    @property
    def kind(self) -> str:
        """The action's type tag (e.g. 'create_file')."""
        return self.action.type


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform side effects and return feedback records.
    They NEVER raise exceptions — failures are captured in the record.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name, action_types, validate, execute
        3. Register it in the AdapterRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'filesystem')."""

    @property
    @abstractmethod
    def action_types(self) -> tuple[str, ...]:
        """Action type tags this adapter handles."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> ActionFeedback:
        """Execute the action and return a feedback record.

        MUST never raise exceptions. All failures are captured
        in the record with status='Failure'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
