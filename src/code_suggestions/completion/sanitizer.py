"""
Cleanup of raw model output into an insertable suggestion.

Every stage is a plain substring scan over the text produced by the previous
stage. A stage that finds nothing to remove passes its input through; the
sanitizer never raises.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from code_suggestions.core.config import DEFAULT_TEMPLATE_NAME, get_fim_template

_FULL_CODE_FENCE_RE = re.compile(r'^\s*```[a-zA-Z0-9]*\n(.*)\n```\s*$', re.DOTALL)


def strip_code_block(payload: str) -> str:
    """
    Unwraps a payload that is entirely one fenced code block.

    Chat-tuned models often answer with ```lang ... ``` even when asked for
    bare code. Anything other than a single full-wrap block is returned
    unchanged.
    """
    match = _FULL_CODE_FENCE_RE.match(payload)
    if match and match.group(1):
        return match.group(1).strip()
    return payload


def strip_prompt_echo(text: str, prompt: str) -> str:
    """Drops everything up to and including the last echo of the prompt."""
    if not prompt:
        return text
    prompt_index = text.rfind(prompt)
    if prompt_index == -1:
        return text
    return text[prompt_index + len(prompt):]


def strip_stop_tokens(text: str, stop_tokens: Iterable[str]) -> str:
    """Truncates at the first occurrence of each stop token, in the given order."""
    for token in stop_tokens:
        if not token:
            continue
        index = text.find(token)
        if index != -1:
            text = text[:index].rstrip()
    return text


def first_code_line(suffix: str) -> str:
    for line in suffix.split("\n"):
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def trim_suffix_overlap(text: str, suffix: str) -> str:
    """
    Cuts the suggestion where it starts repeating the code that follows the
    cursor. A repeat at position 0 is left alone.
    """
    suffix_line = first_code_line(suffix)
    if not suffix_line:
        return text
    overlap_index = text.find(suffix_line)
    if overlap_index > 0:
        return text[:overlap_index].rstrip()
    return text


def sanitize_suggestion(raw: str, suffix_content: str, prompt: str, stop_tokens: Optional[Iterable[str]] = None) -> str:
    """
    Cleans a model response that already went through `strip_code_block`.

    Stages, in order: prompt-echo strip, stop-token truncation, suffix
    overlap trim, final whitespace strip.
    """
    if stop_tokens is None:
        stop_tokens = get_fim_template(DEFAULT_TEMPLATE_NAME).stop_tokens
    cleaned = strip_prompt_echo(raw, prompt)
    cleaned = strip_stop_tokens(cleaned, stop_tokens)
    cleaned = trim_suffix_overlap(cleaned, suffix_content)
    return cleaned.strip()
