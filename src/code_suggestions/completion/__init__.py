"""
Completion pipeline: context windowing, prompt assembly, response cleanup.

    from code_suggestions.completion import (
        window_context,
        build_fim_prompt,
        strip_code_block,
        sanitize_suggestion,
    )
"""

from code_suggestions.completion.windowing import (
    WindowedContext,
    window_context,
)
from code_suggestions.completion.prompt_builder import build_fim_prompt
from code_suggestions.completion.sanitizer import (
    strip_code_block,
    sanitize_suggestion,
)
from code_suggestions.completion.context_blob import build_context_text
from code_suggestions.completion.exceptions import (
    CompletionError,
    MissingCursorMarkerError,
    ModelUnavailableError,
)

__all__ = [
    "WindowedContext",
    "window_context",
    "build_fim_prompt",
    "strip_code_block",
    "sanitize_suggestion",
    "build_context_text",
    "CompletionError",
    "MissingCursorMarkerError",
    "ModelUnavailableError",
]
