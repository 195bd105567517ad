# src/code_suggestions/llm/handler.py
import asyncio
import logging
from typing import Optional

import httpx

from code_suggestions.core.config import APP_CONFIG, AppConfig
from code_suggestions.completion.exceptions import ModelUnavailableError
from code_suggestions.completion.sanitizer import strip_code_block

llm_logger = logging.getLogger("llm_conversation")
app_logger = logging.getLogger("quart.app")

class OllamaClient:
    """A simple async client for the Ollama generate API."""
    def __init__(self, host: str, timeout: Optional[float] = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        if not host.startswith("http://") and not host.startswith("https://"):
            self.host = f"http://{host}"
            app_logger.info(f"Ollama host missing protocol. Automatically prepending 'http://'. New host: {self.host}")
        else:
            self.host = host
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=self.host, timeout=timeout, transport=transport)

    async def generate(self, payload: dict, path: str = "/api/generate") -> dict:
        """
        Posts one non-streaming generate request.

        `timeout` bounds the whole call, not only each connect or read phase,
        so a slowly trickling upstream cannot hold the caller past it.

        Raises:
            ModelUnavailableError: On transport errors, timeouts, non-2xx
                statuses or a body that is not JSON.
        """
        try:
            response = await asyncio.wait_for(self.client.post(path, json=payload), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            app_logger.error(f"Ollama API request failed: HTTP {e.response.status_code}")
            raise ModelUnavailableError(f"Ollama API request failed: HTTP {e.response.status_code}") from e
        except asyncio.TimeoutError as e:
            app_logger.error(f"Ollama API call exceeded {self.timeout} seconds.")
            raise ModelUnavailableError(f"Ollama API call timed out after {self.timeout} seconds.") from e
        except httpx.RequestError as e:
            app_logger.error(f"Ollama API request error: {e!r}")
            raise ModelUnavailableError("Could not connect to Ollama server.") from e
        except ValueError as e:
            app_logger.error(f"Ollama API returned a non-JSON body: {e}")
            raise ModelUnavailableError("Ollama API returned an invalid response.") from e

    async def aclose(self):
        await self.client.aclose()


def create_ollama_client(config: AppConfig = APP_CONFIG) -> OllamaClient:
    return OllamaClient(host=config.OLLAMA_HOST, timeout=config.MODEL_TIMEOUT_SECONDS)


def build_generate_payload(prompt: str, stop_tokens, config: AppConfig = APP_CONFIG) -> dict:
    return {
        "model": config.MODEL_NAME,
        "prompt": prompt,
        "stream": False,
        "options": config.generation_options(stop_tokens),
    }


async def call_fim_model_api(client: OllamaClient, prompt: str, stop_tokens, config: AppConfig = APP_CONFIG) -> str:
    """
    Sends the FIM prompt to the model and returns its text.

    The stop list only asks the model to stop early; callers still sanitize
    the result. A response wrapped in a single code fence is unwrapped here,
    before any other cleanup.
    """
    payload = build_generate_payload(prompt, stop_tokens, config)
    llm_logger.info(f"--- PROMPT ({config.MODEL_NAME}) ---\n{prompt}")

    data = await client.generate(payload, path=config.GENERATE_PATH)

    raw_response = data.get("response") if isinstance(data, dict) else None
    if not isinstance(raw_response, str):
        upstream_error = data.get("error") if isinstance(data, dict) else None
        app_logger.error(f"Ollama API returned no response text (error: {upstream_error!r}).")
        raise ModelUnavailableError("Ollama API returned no response text.")
    llm_logger.info(f"--- RESPONSE ---\n{raw_response}")
    return strip_code_block(raw_response)
