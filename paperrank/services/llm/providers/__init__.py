"""LLM Provider Implementations

This module provides the abstract provider interface and concrete implementations:
- LLMProvider: Abstract base class defining the provider contract
- LLMResponse: Standardized response from any provider
- GoogleProvider: Gemini models (default)
- AnthropicProvider: Claude models
"""

from typing import Optional

from paperrank.services.llm.exceptions import LLMProviderError
from paperrank.services.llm.providers.base import LLMProvider, LLMResponse
from paperrank.services.llm.providers.anthropic import AnthropicProvider
from paperrank.services.llm.providers.google import GoogleProvider

PROVIDERS = {
    "google": GoogleProvider,
    "anthropic": AnthropicProvider,
}


def create_provider(
    provider: str, api_key: str, model: Optional[str] = None
) -> LLMProvider:
    """Instantiate a provider by name.

    Args:
        provider: "google" or "anthropic"
        api_key: API key for the provider
        model: Model identifier; the provider default if None

    Raises:
        LLMProviderError: If the provider name is unknown or its SDK is
            not installed
    """
    provider_cls = PROVIDERS.get(provider.lower())
    if provider_cls is None:
        raise LLMProviderError(f"Unknown LLM provider: {provider}", provider=provider)
    if model:
        return provider_cls(api_key=api_key, model=model)
    return provider_cls(api_key=api_key)


__all__ = [
    "LLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "GoogleProvider",
    "PROVIDERS",
    "create_provider",
]
