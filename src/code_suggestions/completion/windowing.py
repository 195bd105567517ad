"""
Cursor-relative context windowing.

Splits the editor's context text at the cursor marker and trims both sides
to a shared character budget, discarding the text furthest from the cursor.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from code_suggestions.core.config import CURSOR_MARKER
from code_suggestions.completion.exceptions import MissingCursorMarkerError

logger = logging.getLogger("quart.app")


@dataclass(frozen=True)
class WindowedContext:
    """Prefix and suffix around the cursor after budget trimming."""

    prefix_content: str
    """Text before the cursor; its tail is the text nearest the cursor."""

    suffix_content: str
    """Text after the cursor; its head is the text nearest the cursor."""

    @property
    def total_length(self) -> int:
        return len(self.prefix_content) + len(self.suffix_content)


def normalize_context_text(text: str) -> str:
    # Only the first double space is removed.
    return text.replace("  ", "", 1).strip()


def split_at_cursor(text: str, marker: str = CURSOR_MARKER) -> WindowedContext:
    """
    Splits normalized context text at the first cursor marker.

    Raises:
        MissingCursorMarkerError: If the marker does not occur in the text.
    """
    cursor_index = text.find(marker)
    if cursor_index == -1:
        raise MissingCursorMarkerError("Cursor marker not found in context text.")
    return WindowedContext(
        prefix_content=text[:cursor_index],
        suffix_content=text[cursor_index + len(marker):],
    )


def trim_to_budget(context: WindowedContext, limit: int, prefix_ratio: float = 0.7) -> WindowedContext:
    """
    Trims prefix and suffix so their combined length is at most `limit`.

    `prefix_ratio` of the excess is cut from the start of the prefix and the
    rest from the end of the suffix; the ratio is clamped to [0, 1]. Each
    cut is clamped to the length of its string; excess the suffix cannot
    absorb is taken from the prefix.
    """
    prefix, suffix = context.prefix_content, context.suffix_content
    combined = len(prefix) + len(suffix)
    limit = max(0, limit)
    if combined <= limit:
        return context

    prefix_ratio = min(max(prefix_ratio, 0.0), 1.0)
    excess = combined - limit
    trim_prefix_by = min(math.floor(excess * prefix_ratio), len(prefix))
    trim_suffix_by = min(excess - trim_prefix_by, len(suffix))
    trim_prefix_by += excess - trim_prefix_by - trim_suffix_by

    logger.debug(
        f"Context over budget by {excess} chars: trimming prefix by {trim_prefix_by}, suffix by {trim_suffix_by}."
    )
    return WindowedContext(
        prefix_content=prefix[trim_prefix_by:],
        suffix_content=suffix[:len(suffix) - trim_suffix_by],
    )


def window_context(text: str, limit: int, prefix_ratio: float = 0.7, marker: str = CURSOR_MARKER) -> WindowedContext:
    """Normalizes, splits at the cursor and trims to the character budget."""
    return trim_to_budget(split_at_cursor(normalize_context_text(text), marker), limit, prefix_ratio)
