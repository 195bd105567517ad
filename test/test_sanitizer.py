"""
Unit tests for model response cleanup.

Validates that sanitize_suggestion():
1. Removes an echoed prompt (last occurrence)
2. Truncates at control tokens and the file separator, in order
3. Cuts regenerated code that already follows the cursor
4. Is idempotent on its own output
and that strip_code_block() only unwraps a payload that is one full fenced block.
"""
import sys
import os

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from code_suggestions.core.config import get_fim_template
from code_suggestions.completion.prompt_builder import build_fim_prompt
from code_suggestions.completion.sanitizer import (
    first_code_line,
    sanitize_suggestion,
    strip_code_block,
    strip_prompt_echo,
    strip_stop_tokens,
    trim_suffix_overlap,
)

TEMPLATE = get_fim_template("qwen2.5-coder-instruct")
PROMPT = build_fim_prompt("function add(a, b) {\n  ", "\n}", TEMPLATE)


def test_echoed_prompt_is_removed():
    assert sanitize_suggestion(PROMPT + "foo();", "", PROMPT) == "foo();"


def test_last_echo_wins():
    raw = PROMPT + "stale" + PROMPT + "return a + b;"
    assert strip_prompt_echo(raw, PROMPT) == "return a + b;"


def test_missing_echo_leaves_text():
    assert strip_prompt_echo("return a + b;", PROMPT) == "return a + b;"


def test_empty_prompt_is_not_an_echo():
    assert sanitize_suggestion("x=1<|im_end|>\nnext", "", "") == "x=1"


def test_stop_tokens_are_checked_in_order():
    raw = "a <|im_end|> b <|fim_prefix|> c"
    assert strip_stop_tokens(raw, TEMPLATE.stop_tokens) == "a"


@pytest.mark.parametrize("raw", [
    "foo();\n\n--- FILE: /src/other.ts ---\nbar();",
    "foo();</tool_response>{\"ok\": true}",
    "foo();  <|im_start|>user\nmore",
    "foo();<|fim_middle|>foo();",
])
def test_control_tokens_truncate(raw):
    assert sanitize_suggestion(raw, "", PROMPT) == "foo();"


def test_suffix_overlap_is_trimmed():
    raw = "const x = compute();\n  return x;\n}"
    suffix = "\n  return x;\n}"
    assert sanitize_suggestion(raw, suffix, PROMPT) == "const x = compute();"


def test_overlap_at_start_is_kept():
    assert trim_suffix_overlap("return x;", "return x;\n}") == "return x;"


def test_blank_suffix_skips_overlap():
    assert trim_suffix_overlap("a\nb", "\n\n   \n") == "a\nb"


def test_first_code_line_skips_blank_lines():
    assert first_code_line("\n   \n  return x;  \n}") == "return x;"


def test_empty_inputs():
    assert sanitize_suggestion("", "", "") == ""
    assert sanitize_suggestion("   \n", "\n", PROMPT) == ""


@pytest.mark.parametrize("raw,suffix", [
    (PROMPT + "foo();", ""),
    ("x=1<|im_end|>\nnext", "next"),
    ("  let y = 2;\n  return y;\n}\n\n--- FILE: a.ts ---", "  return y;\n}"),
    ("return x; // done", "return x;"),
    ("\nreturn x;", "return x;"),
])
def test_sanitize_is_idempotent(raw, suffix):
    once = sanitize_suggestion(raw, suffix, PROMPT)
    assert sanitize_suggestion(once, suffix, PROMPT) == once


def test_code_fence_is_unwrapped():
    assert strip_code_block("```ts\nconst a = 1;\n```") == "const a = 1;"


def test_code_fence_with_surrounding_whitespace():
    assert strip_code_block("\n  ```python\nx = 1\ny = 2\n```  \n") == "x = 1\ny = 2"


@pytest.mark.parametrize("payload", [
    "const a = 1;",
    "Here you go:\n```ts\nconst a = 1;\n```",
    "```ts\nconst a = 1;",
    "```\n\n```",
])
def test_partial_fences_pass_through(payload):
    assert strip_code_block(payload) == payload


def test_fence_unwrap_then_sanitize():
    raw = strip_code_block("```ts\nconst a = 1;<|im_end|>\n```")
    assert sanitize_suggestion(raw, "", PROMPT) == "const a = 1;"
