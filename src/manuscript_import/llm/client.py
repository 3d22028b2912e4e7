"""LLM client for OpenAI-compatible text-analysis services.

Provides the single call the structure augmenter needs: one system prompt,
one user message, one JSON object back. The underlying OpenAI client is
built with ``max_retries`` from config (0 by default) and a hard timeout.

Provider endpoints, default models and API-key variables come from the
``providers`` table of the app config; the ``llm`` section picks the
active provider.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import structlog
from openai import OpenAI

from manuscript_import.config.app_config import AppConfig, load_app_config

logger = structlog.get_logger(__name__)

# Some models emit reasoning blocks before the JSON body
SANITIZE_PATTERNS = [
    re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<analysis>.*?</analysis>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<reasoning>.*?</reasoning>", re.DOTALL | re.IGNORECASE),
]

FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class LLMError(Exception):
    """Error during LLM interaction."""

    pass


class LLMConnectionError(LLMError):
    """Error connecting to LLM server (includes timeouts)."""

    pass


class LLMResponseError(LLMError):
    """Error in LLM response."""

    pass


def parse_json_object(content: str) -> dict[str, Any] | None:
    """Extract a JSON object from a model reply.

    Reasoning tags are removed first, then the reply is tried as-is, as the
    body of a fenced block, and as the outermost ``{...}`` slice.
    Returns None when nothing parses to an object.
    """
    for pattern in SANITIZE_PATTERNS:
        content = pattern.sub("", content)
    content = content.strip()

    candidates = [content]

    fenced = FENCED_JSON.search(content)
    if fenced:
        candidates.append(fenced.group(1).strip())

    start = content.find("{")
    end = content.rfind("}") + 1
    if start >= 0 and end > start:
        candidates.append(content[start:end])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    return None


@dataclass
class LLMConfig:
    """Resolved settings for one provider."""

    provider: str = "openai"
    base_url: str | None = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout: float = 60.0
    max_retries: int = 0
    api_key: str | None = None
    requires_api_key: bool = True
    supports_json_object: bool = True

    @classmethod
    def from_app_config(
        cls,
        app_config: AppConfig | None = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> LLMConfig:
        """Resolve the active provider against the providers table.

        An explicit ``provider`` replaces ``llm.provider`` and brings its own
        base URL and default model; ``llm.base_url`` and ``llm.model`` only
        apply to the configured provider.

        Raises:
            LLMError: If the provider is not in the providers table
        """
        if app_config is None:
            app_config = load_app_config()

        settings = app_config.llm
        name = provider or settings.provider
        provider_config = app_config.providers.get(name)
        if provider_config is None:
            raise LLMError(f"Unknown LLM provider: {name}")

        base_url = provider_config.base_url
        default_model = provider_config.default_model
        supports_json_object = provider_config.supports_json_object
        if provider is None:
            base_url = settings.base_url or base_url
            default_model = settings.model or default_model
            if settings.supports_json_object is not None:
                supports_json_object = settings.supports_json_object

        return cls(
            provider=name,
            base_url=base_url,
            model=model or default_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            api_key=provider_config.get_api_key(),
            requires_api_key=provider_config.requires_api_key,
            supports_json_object=supports_json_object,
        )

    def is_configured(self) -> bool:
        """True unless the provider needs an API key that is missing."""
        return not self.requires_api_key or bool(self.api_key)


class LLMClient:
    """Client for OpenAI-compatible chat completion services."""

    def __init__(self, config: LLMConfig | None = None):
        self.config = config or LLMConfig.from_app_config()

        self._client = OpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key or "not-needed",
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

        logger.info(
            "llm_client_initialized",
            provider=self.config.provider,
            model=self.config.model,
            base_url=self.config.base_url,
        )

    def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        """Send one chat completion request and return the reply text.

        Raises:
            LLMConnectionError: If the server cannot be reached or times out
            LLMResponseError: If the reply has no choices
            LLMError: Any other failure reported by the service
        """
        request_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature if temperature is None else temperature,
            "max_tokens": self.config.max_tokens if max_tokens is None else max_tokens,
        }
        if json_mode and self.config.supports_json_object:
            request_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self._client.chat.completions.create(**request_kwargs)
        except Exception as e:
            lowered = str(e).lower()
            if "connect" in lowered or "timed out" in lowered or "timeout" in lowered:
                raise LLMConnectionError(
                    f"Could not reach {self.config.provider} at {self.config.base_url}: {e}"
                ) from e
            raise LLMError(f"LLM call failed: {e}") from e

        if not response.choices:
            raise LLMResponseError("Empty response from LLM")

        logger.debug(
            "llm_response",
            provider=self.config.provider,
            model=response.model,
            tokens=response.usage.total_tokens if response.usage else 0,
        )
        return response.choices[0].message.content or ""

    def simple_json(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Single-turn chat expecting a JSON object reply.

        One attempt: a reply that does not parse is an error.

        Raises:
            LLMResponseError: If the reply holds no JSON object
        """
        content = self.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True,
        )

        parsed = parse_json_object(content)
        if parsed is None:
            raise LLMResponseError(f"Could not obtain valid JSON: {content[:200]}...")
        return parsed
