"""LLM provider modules for heyi."""
from .base import LLMProvider, LLMResponse, ProviderConfig
from .openrouter import OpenRouterProvider

__all__ = [
    'LLMProvider', 'LLMResponse', 'ProviderConfig',
    'OpenRouterProvider',
]
