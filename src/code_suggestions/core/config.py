# src/code_suggestions/core/config.py
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

# --- Editor wire constants ---
CURSOR_MARKER = "<|CURSOR|>"
FILE_SEPARATOR = "\n\n--- FILE: "
TOOL_RESPONSE_END = "</tool_response>"

# --- Fixed response bodies ---
BUSY_TEXT = "in process"
CURSOR_MISSING_MESSAGE = "Cursor marker missing."
GENERATION_FAILED_MESSAGE = "Failed to generate AI suggestion."
INVALID_REQUEST_MESSAGE = "Invalid request body."

DEFAULT_SYSTEM_INSTRUCTION = "You are a concise code completion engine. Only output code, nothing else."


@dataclass(frozen=True)
class FimTemplate:
    """
    Token set and envelope for one model family.

    A template with `role_start`/`role_end` set wraps the FIM segment in a
    system/user/assistant chat envelope; without them the bare FIM segment
    is sent.
    """

    name: str
    fim_prefix: str
    fim_suffix: str
    fim_middle: str
    role_start: str = ""
    role_end: str = ""
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION
    extra_stop_tokens: Tuple[str, ...] = ()

    @property
    def is_chat(self) -> bool:
        return bool(self.role_start and self.role_end)

    @property
    def stop_tokens(self) -> Tuple[str, ...]:
        """Stop tokens in the order the sanitizer checks them."""
        tokens = [self.fim_prefix, self.fim_suffix, self.fim_middle]
        if self.is_chat:
            tokens += [self.role_start, self.role_end]
        tokens += list(self.extra_stop_tokens)
        tokens += [TOOL_RESPONSE_END, FILE_SEPARATOR]
        return tuple(tokens)


FIM_TEMPLATES = {
    "qwen2.5-coder-instruct": FimTemplate(
        name="qwen2.5-coder-instruct",
        fim_prefix="<|fim_prefix|>",
        fim_suffix="<|fim_suffix|>",
        fim_middle="<|fim_middle|>",
        role_start="<|im_start|>",
        role_end="<|im_end|>",
    ),
    "qwen2.5-coder-base": FimTemplate(
        name="qwen2.5-coder-base",
        fim_prefix="<|fim_prefix|>",
        fim_suffix="<|fim_suffix|>",
        fim_middle="<|fim_middle|>",
        extra_stop_tokens=("<|endoftext|>", "<|file_sep|>"),
    ),
    "starcoder2": FimTemplate(
        name="starcoder2",
        fim_prefix="<fim_prefix>",
        fim_suffix="<fim_suffix>",
        fim_middle="<fim_middle>",
        extra_stop_tokens=("<|endoftext|>", "<file_sep>"),
    ),
}

DEFAULT_TEMPLATE_NAME = "qwen2.5-coder-instruct"


def get_fim_template(name: str) -> FimTemplate:
    """Looks up a registered template, raising ValueError for unknown names."""
    try:
        return FIM_TEMPLATES[name]
    except KeyError:
        known = ", ".join(sorted(FIM_TEMPLATES))
        raise ValueError(f"Unknown FIM template '{name}'. Known templates: {known}") from None


class AppConfig:
    """
    Holds static configuration settings for the application.
    Values are read from CS_* environment variables (or a .env file) at startup.
    """
    # --- Model endpoint ---
    OLLAMA_HOST = os.environ.get('CS_OLLAMA_HOST', 'http://localhost:11434')
    GENERATE_PATH = "/api/generate"
    MODEL_NAME = os.environ.get('CS_MODEL_NAME', 'dagbs/qwen2.5-coder-7b-instruct-abliterated:q4_k_l')
    MODEL_TIMEOUT_SECONDS = float(os.environ.get('CS_MODEL_TIMEOUT_SECONDS', '120')) # Upper bound on one model call; a hung upstream releases the gate after this.

    # --- Prompt construction ---
    FIM_TEMPLATE = os.environ.get('CS_FIM_TEMPLATE', DEFAULT_TEMPLATE_NAME)
    CONTEXT_LIMIT = int(os.environ.get('CS_CONTEXT_LIMIT', '2000')) # Character budget shared by prefix and suffix.
    PREFIX_TRIM_RATIO = float(os.environ.get('CS_PREFIX_TRIM_RATIO', '0.7')) # Share of the excess removed from the prefix.

    # --- Generation options ---
    TEMPERATURE = float(os.environ.get('CS_TEMPERATURE', '0.2'))
    NUM_CTX = int(os.environ.get('CS_NUM_CTX', '4096'))
    REPETITION_PENALTY = float(os.environ.get('CS_REPETITION_PENALTY', '1.15'))
    NUM_PREDICT = int(os.environ.get('CS_NUM_PREDICT', '1000'))

    @property
    def template(self) -> FimTemplate:
        return get_fim_template(self.FIM_TEMPLATE)

    def generation_options(self, stop_tokens) -> dict:
        """Builds the `options` object of an Ollama generate request."""
        return {
            "temperature": self.TEMPERATURE,
            "num_ctx": self.NUM_CTX,
            "repetition_penalty": self.REPETITION_PENALTY,
            "num_predict": self.NUM_PREDICT,
            "stop": list(stop_tokens),
        }

APP_CONFIG = AppConfig()
