"""
Request orchestration: window → assemble → gated model call → sanitize.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from code_suggestions.core.config import APP_CONFIG, BUSY_TEXT, AppConfig, FimTemplate
from code_suggestions.core.gate import ProcessingGate
from code_suggestions.completion.prompt_builder import build_fim_prompt
from code_suggestions.completion.sanitizer import sanitize_suggestion
from code_suggestions.completion.windowing import window_context
from code_suggestions.llm.handler import call_fim_model_api

app_logger = logging.getLogger("quart.app")


@dataclass(frozen=True)
class CompletionOutcome:
    text: str
    busy: bool = False


class CompletionService:
    """
    Owns the model client, the template and the processing gate for one
    server process.
    """

    def __init__(self, client, gate: ProcessingGate, config: AppConfig = APP_CONFIG, template: Optional[FimTemplate] = None):
        self.client = client
        self.gate = gate
        self.config = config
        self.template = template or config.template

    async def complete(self, context_text: str, language_id: Optional[str] = None) -> CompletionOutcome:
        """
        Produces a suggestion for the cursor position in `context_text`.

        Raises:
            MissingCursorMarkerError: Before any model work when the text has no marker.
            ModelUnavailableError: When the model call fails. The gate is released first.
        """
        windowed = window_context(context_text, self.config.CONTEXT_LIMIT, self.config.PREFIX_TRIM_RATIO)
        prompt = build_fim_prompt(windowed.prefix_content, windowed.suffix_content, self.template)

        app_logger.info(
            f"Completion request (language={language_id or 'unknown'}): prompt length {len(prompt)}, "
            f"prefix {len(windowed.prefix_content)} chars, suffix {len(windowed.suffix_content)} chars."
        )

        with self.gate.hold() as acquired:
            if not acquired:
                app_logger.info("Model call already in flight; answering with busy response.")
                return CompletionOutcome(text=BUSY_TEXT, busy=True)
            raw_suggestion = await call_fim_model_api(self.client, prompt, self.template.stop_tokens, self.config)

        suggestion = sanitize_suggestion(raw_suggestion, windowed.suffix_content, prompt, self.template.stop_tokens)
        app_logger.debug(f"Suggestion ({len(suggestion)} chars): {suggestion!r}")
        return CompletionOutcome(text=suggestion)
