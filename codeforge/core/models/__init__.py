"""
Domain models — Pydantic types for codeforge.

All models are re-exported here for convenient access:

    from codeforge.core.models import Action, ActionFeedback, ExtractedFile
"""

from codeforge.core.models.action import (
    Action,
    ActionFeedback,
    ActionResponse,
    CreateFileAction,
    CreateFolderAction,
    ExecuteCommandAction,
)
from codeforge.core.models.files import ExtractedFile
from codeforge.core.models.response import (
    Candidate,
    CodeExecutionResultPart,
    Content,
    ExecutableCodePart,
    GeminiApiResponse,
    PromptFeedback,
    ResponseError,
    TextPart,
    UnknownPart,
)

__all__ = [
    # action.py
    "Action",
    "ActionFeedback",
    "ActionResponse",
    # response.py
    "Candidate",
    "CodeExecutionResultPart",
    "Content",
    "CreateFileAction",
    "CreateFolderAction",
    "ExecutableCodePart",
    "ExecuteCommandAction",
    # files.py
    "ExtractedFile",
    "GeminiApiResponse",
    "PromptFeedback",
    "ResponseError",
    "TextPart",
    "UnknownPart",
]
