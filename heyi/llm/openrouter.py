"""
OpenRouter LLM provider implementation for heyi.
"""
import logging
import time
from typing import Any, Optional

import httpx

from ..constants import DEFAULT_MODEL, OPENROUTER_BASE_URL, PROVIDER_TIMEOUT_SECONDS
from ..errors import ResponseError
from .base import LLMProvider, LLMResponse, ProviderConfig


logger = logging.getLogger(__name__)


class OpenRouterProvider(LLMProvider):
    """
    OpenRouter API provider for unified access to multiple LLMs.

    OpenRouter provides a single API to access models from OpenAI,
    Anthropic, Google, Meta, and many other providers, addressed as
    "vendor/model" identifiers.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        site_name: Optional[str] = None,
    ) -> None:
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            model: Default model to use
            transport: Optional httpx transport (tests pass a MockTransport)
            site_name: App name reported to OpenRouter
        """
        config = self._default_config()
        if api_key:
            config.api_key = api_key
        if model:
            config.default_model = model
        super().__init__(config)

        self._transport = transport
        self._headers["X-Title"] = site_name or "heyi"

    def _default_config(self) -> ProviderConfig:
        return ProviderConfig(
            name="OpenRouter",
            base_url=OPENROUTER_BASE_URL,
            default_model=DEFAULT_MODEL,
            timeout=PROVIDER_TIMEOUT_SECONDS,
        )

    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat completion request to OpenRouter."""
        model = model or self.default_model

        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            **kwargs
        }

        logger.debug(f"POST {self._config.base_url}/chat/completions (model={model})")
        start_time = time.perf_counter()

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{self._config.base_url}/chat/completions",
                headers=self._build_headers(),
                json=payload,
                timeout=self._config.timeout
            )
            response.raise_for_status()
            data = response.json()

        latency_ms = (time.perf_counter() - start_time) * 1000

        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ResponseError(f"OpenRouter returned an error: {message}")

        choice = data["choices"][0]
        content = choice["message"].get("content") or ""
        usage = data.get("usage") or {}

        logger.debug(f"OpenRouter replied in {latency_ms:.0f} ms")
        return LLMResponse(
            content=content,
            model=data.get("model", model),
            provider=self.name,
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            finish_reason=choice.get("finish_reason") or "stop",
            latency_ms=latency_ms,
            raw_response=data
        )
