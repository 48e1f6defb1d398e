"""
Base classes for LLM providers in heyi.
Defines the interface the runner uses to reach a remote model.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class LLMResponse:
    """A single completion returned by a provider.

    Attributes:
        content: Text of the assistant message (JSON for structured output).
        model: Model that actually answered.
        provider: Provider name.
        input_tokens: Prompt tokens billed.
        output_tokens: Completion tokens billed.
        finish_reason: Why generation stopped.
        latency_ms: Wall time of the request.
        raw_response: Decoded response body.
    """
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"
    latency_ms: float = 0.0
    raw_response: Optional[dict] = None


@dataclass
class ProviderConfig:
    """Connection settings for a provider."""
    name: str
    base_url: str
    api_key: Optional[str] = None
    default_model: str = ""
    timeout: float = 120.0


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    A provider turns a list of chat messages into one LLMResponse. Request
    failures are raised to the caller unchanged; there is no retry.
    """

    def __init__(self, config: Optional[ProviderConfig] = None) -> None:
        self._config = config or self._default_config()
        self._headers: dict[str, str] = {}

    @abstractmethod
    def _default_config(self) -> ProviderConfig:
        """Connection settings used when none are passed in."""
        pass

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def default_model(self) -> str:
        return self._config.default_model

    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model identifier, or None for the provider default
            **kwargs: Extra request fields such as response_format

        Returns:
            LLMResponse with the completion
        """
        pass

    def _build_headers(self) -> dict[str, str]:
        """Request headers including bearer authentication."""
        headers = {"Content-Type": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        headers.update(self._headers)
        return headers

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, model={self.default_model!r})"
