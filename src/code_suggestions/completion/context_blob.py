"""
Builds the `context_text` blob the editor sends to `/complete`.

Each file is introduced by FILE_SEPARATOR, its path and " ---"; the cursor
marker is inserted into the primary file at the caret offset.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from code_suggestions.core.config import CURSOR_MARKER, FILE_SEPARATOR


def build_context_text(files: Iterable[Tuple[str, str]], cursor_path: str, cursor_offset: int) -> str:
    """
    Args:
        files: (path, content) pairs in the order they should appear.
        cursor_path: Path of the file that holds the caret.
        cursor_offset: Character offset of the caret inside that file.
    """
    parts = []
    for path, content in files:
        if path == cursor_path:
            offset = max(0, min(cursor_offset, len(content)))
            content = content[:offset] + CURSOR_MARKER + content[offset:]
        parts.append(f"{FILE_SEPARATOR}{path} ---\n{content}")
    return "".join(parts)
