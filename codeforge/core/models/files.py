"""
ExtractedFile — a (path, content) pair pulled out of a model reply.
"""

from __future__ import annotations

from pydantic import BaseModel


class ExtractedFile(BaseModel):
    """A file found in a model reply.

    ``path`` is relative and unsanitized. It only becomes canonical
    after the materializer runs it through the path sanitizer.
    """

    path: str
    content: str = ""
