"""
Unit tests for cursor-relative context windowing.

Validates that window_context():
1. Rejects text without a cursor marker
2. Leaves prefix/suffix untouched when they fit the budget
3. Trims 70% of the excess from the prefix start and the rest from the suffix end
4. Never exceeds the budget, even when one side is too short to absorb its share
"""
import sys
import os

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from code_suggestions.core.config import CURSOR_MARKER
from code_suggestions.completion.context_blob import build_context_text
from code_suggestions.completion.exceptions import MissingCursorMarkerError
from code_suggestions.completion.windowing import (
    WindowedContext,
    normalize_context_text,
    split_at_cursor,
    trim_to_budget,
    window_context,
)


def test_missing_marker_raises():
    with pytest.raises(MissingCursorMarkerError):
        window_context("const a = 1;\nconst b = 2;", 2000)


def test_normalize_removes_only_first_double_space_and_strips():
    assert normalize_context_text("  a  b  c \n") == "a  b  c"
    assert normalize_context_text("x  y  z") == "xy  z"


def test_split_uses_first_marker():
    context = split_at_cursor(f"ab{CURSOR_MARKER}cd")
    assert context == WindowedContext(prefix_content="ab", suffix_content="cd")


def test_within_budget_is_identity():
    text = f"def add(a, b):\n\treturn {CURSOR_MARKER}\n\nprint(add(1, 2))"
    context = window_context(text, 2000)
    assert context.prefix_content == "def add(a, b):\n\treturn "
    assert context.suffix_content == "\n\nprint(add(1, 2))"


def test_exact_budget_is_identity():
    context = window_context("a" * 10 + CURSOR_MARKER + "b" * 10, 20)
    assert context.prefix_content == "a" * 10
    assert context.suffix_content == "b" * 10


def test_over_budget_keeps_text_nearest_cursor():
    prefix = "A" * 350 + "B" * 1150
    suffix = "C" * 850 + "D" * 150
    context = window_context(prefix + CURSOR_MARKER + suffix, 2000)

    assert context.prefix_content == "B" * 1150
    assert context.suffix_content == "C" * 850
    assert context.total_length == 2000


def test_short_suffix_leaves_rest_of_excess_to_prefix():
    context = window_context("x" * 2100 + CURSOR_MARKER, 2000)
    assert context.suffix_content == ""
    assert len(context.prefix_content) == 2000


def test_short_prefix_is_emptied_and_suffix_takes_remainder():
    context = window_context("ab" + CURSOR_MARKER + "y" * 2100, 2000)
    assert context.prefix_content == ""
    assert context.suffix_content == "y" * 2000


def test_zero_limit_empties_both_sides():
    context = trim_to_budget(WindowedContext("abc", "def"), 0)
    assert context == WindowedContext("", "")


def test_custom_ratio():
    context = trim_to_budget(WindowedContext("p" * 100, "s" * 100), 100, prefix_ratio=0.5)
    assert context == WindowedContext("p" * 50, "s" * 50)


def test_windowing_editor_blob():
    blob = build_context_text(
        [("/src/a.ts", "const a = 1;\n"), ("/src/b.ts", "export const b = 2;")],
        cursor_path="/src/a.ts",
        cursor_offset=6,
    )
    assert blob == (
        "\n\n--- FILE: /src/a.ts ---\nconst <|CURSOR|>a = 1;\n"
        "\n\n--- FILE: /src/b.ts ---\nexport const b = 2;"
    )

    context = window_context(blob, 2000)
    assert context.prefix_content == "--- FILE: /src/a.ts ---\nconst "
    assert context.suffix_content.startswith("a = 1;\n")


def test_context_blob_clamps_offset():
    blob = build_context_text([("a.py", "x = 1")], "a.py", 99)
    assert blob.endswith("x = 1" + CURSOR_MARKER)


def test_indented_context_loses_first_double_space_only():
    text = f"def add(a, b):\n    return {CURSOR_MARKER}\n    pass"
    context = window_context(text, 2000)
    assert context.prefix_content == "def add(a, b):\n  return "
    assert context.suffix_content == "\n    pass"


def test_ratio_above_one_trims_only_the_excess():
    context = trim_to_budget(WindowedContext("p" * 100, "s" * 100), 150, prefix_ratio=1.5)
    assert context == WindowedContext("p" * 50, "s" * 100)


def test_negative_ratio_trims_suffix_only():
    context = trim_to_budget(WindowedContext("p" * 100, "s" * 100), 150, prefix_ratio=-0.5)
    assert context == WindowedContext("p" * 100, "s" * 50)
