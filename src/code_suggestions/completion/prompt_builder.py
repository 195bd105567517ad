"""
FIM prompt assembly.

Everything model-specific (FIM tokens, role tokens, system instruction) comes
from the FimTemplate, so swapping model families never touches windowing or
sanitizing.
"""

from __future__ import annotations

from code_suggestions.core.config import FimTemplate


def build_fim_segment(prefix: str, suffix: str, template: FimTemplate) -> str:
    return f"{template.fim_prefix}{prefix}{template.fim_suffix}{suffix}{template.fim_middle}"


def build_fim_prompt(prefix: str, suffix: str, template: FimTemplate) -> str:
    """
    Returns the exact prompt string sent to the model.

    Chat templates produce a system turn with the instruction, a user turn
    with the FIM segment and an opened assistant turn:

        <|im_start|>system
        {instruction}<|im_end|>
        <|im_start|>user
        {fim segment}<|im_end|>
        <|im_start|>assistant

    Bare templates return the FIM segment alone.
    """
    fim_segment = build_fim_segment(prefix, suffix, template)
    if not template.is_chat:
        return fim_segment

    start, end = template.role_start, template.role_end
    return (
        f"{start}system\n{template.system_instruction}{end}\n"
        f"{start}user\n{fim_segment}{end}\n"
        f"{start}assistant\n"
    )
