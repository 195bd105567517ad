"""
Request body models for the completion API.
"""

from typing import Optional

from pydantic import BaseModel, StrictStr


class CompletionRequest(BaseModel):
    """Body of POST /complete as sent by the editor extension."""

    context_text: StrictStr
    """All context files joined by the file separator, with the cursor marker in the active file."""

    language_id: Optional[str] = None
    """Editor language identifier of the active document (e.g. 'typescript')."""

    prefix: Optional[str] = None
    """Text of the cursor line up to the caret."""
