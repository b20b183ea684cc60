"""
Action and ActionFeedback models — the execution contract.

Actions are the structured instructions the model emits in chat mode.
Feedback records are their outcomes. The executor sends Actions to
adapters, adapters return ActionFeedback. Never exceptions.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateFolderAction(BaseModel):
    """Create a directory (and its parents) under the output root."""

    model_config = ConfigDict(frozen=True)

    type: Literal["create_folder"] = "create_folder"
    path: str

    @property
    def detail(self) -> str:
        return f"path: {self.path}"


class CreateFileAction(BaseModel):
    """Create (or overwrite) a file under the output root."""

    model_config = ConfigDict(frozen=True)

    type: Literal["create_file"] = "create_file"
    path: str
    content: str = ""

    @property
    def detail(self) -> str:
        return f"path: {self.path}"


class ExecuteCommandAction(BaseModel):
    """Run a program with a positional argument vector."""

    model_config = ConfigDict(frozen=True)

    type: Literal["execute_command"] = "execute_command"
    command: str
    args: list[str] = Field(default_factory=list)

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args]).strip()

    @property
    def detail(self) -> str:
        return self.command_line


Action = Annotated[
    Union[CreateFolderAction, CreateFileAction, ExecuteCommandAction],
    Field(discriminator="type"),
]


class ActionResponse(BaseModel):
    """A chat-mode reply: actions to run plus a message for the operator."""

    commands: list[Action] = Field(default_factory=list)
    user_message: str = ""

    @field_validator("commands", mode="before")
    @classmethod
    def _normalize_legacy_commands(cls, value: Any) -> Any:
        # Older prompts advertised write_code_to_file{path, code}.
        if not isinstance(value, list):
            return value
        normalized = []
        for item in value:
            if isinstance(item, dict) and item.get("type") == "write_code_to_file":
                item = {
                    "type": "create_file",
                    "path": item.get("path", ""),
                    "content": item.get("code", item.get("content", "")),
                }
            normalized.append(item)
        return normalized


class ActionFeedback(BaseModel):
    """Outcome of one executed action.

    Feedback records are replayed to the model on the next turn, so
    the serialized form carries only the four descriptive fields.
    """

    action_kind: str
    action_detail: str = ""
    status: Literal["Success", "Failure"] = "Success"
    message: str = ""

    duration_ms: int = Field(default=0, exclude=True)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "Success"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "Failure"

    @classmethod
    def success(
        cls,
        action_kind: str,
        action_detail: str,
        message: str = "",
        **kwargs: Any,
    ) -> ActionFeedback:
        """Create a success record."""
        return cls(
            action_kind=action_kind,
            action_detail=action_detail,
            status="Success",
            message=message,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        action_kind: str,
        action_detail: str,
        message: str,
        **kwargs: Any,
    ) -> ActionFeedback:
        """Create a failure record."""
        return cls(
            action_kind=action_kind,
            action_detail=action_detail,
            status="Failure",
            message=message,
            **kwargs,
        )
