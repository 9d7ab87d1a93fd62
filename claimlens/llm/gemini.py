from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Protocol
import google.generativeai as genai
from claimlens.utils.config import AppConfig
from claimlens.utils.exceptions import ServiceCommunicationError
from claimlens.utils.logger import logger


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


class StructuredGenerator(Protocol):
    def generate_structured(self, prompt: Prompt, schema: Dict[str, Any]) -> str: ...


class GeminiClient:
    """Gemini backend for schema-constrained JSON generation.

    Construction does no I/O; call configure() once before generating. The
    client never retries: one call, one outbound request.
    """

    def __init__(self, config: AppConfig, api_key: str | None = None):
        self.config = config
        self._api_key = api_key
        self._configured = False

    def configure(self) -> "GeminiClient":
        api_key = self._api_key or self.config.api_key()
        if not api_key:
            raise ServiceCommunicationError(f"{self.config.api_key_env} not set")
        genai.configure(api_key=api_key)
        self._configured = True
        return self

    def generate_structured(self, prompt: Prompt, schema: Dict[str, Any]) -> str:
        if not self._configured:
            self.configure()
        model = genai.GenerativeModel(self.config.model_name, system_instruction=prompt.system)
        generation_config = {
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_tokens,
            "response_mime_type": "application/json",
            "response_schema": schema,
        }
        try:
            rsp = model.generate_content(prompt.user, generation_config=generation_config)
            return rsp.text
        except Exception as e:
            logger.error("Gemini request failed (%s): %s", self.config.model_name, type(e).__name__)
            raise ServiceCommunicationError(
                "An error occurred while communicating with the AI analysis service.",
                {"model": self.config.model_name, "cause": type(e).__name__},
            ) from e
