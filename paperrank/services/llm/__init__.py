"""LLM Package

Provides the pieces behind AI reranking:
- Provider implementations (Google Gemini, Anthropic Claude)
- Prompt building and response parsing for batch scoring
- Provider exception hierarchy

Usage:
    from paperrank.services.llm import create_provider, PromptBuilder, ResponseParser
"""

from paperrank.services.llm.prompt_builder import PromptBuilder
from paperrank.services.llm.response_parser import ResponseParser
from paperrank.services.llm.providers import create_provider
from paperrank.services.llm.providers.base import LLMProvider, LLMResponse
from paperrank.services.llm.exceptions import (
    LLMProviderError,
    AuthenticationError,
    RateLimitError,
    QuotaExhaustedError,
    ModelNotFoundError,
    ContentFilterError,
    ProviderUnavailableError,
    ProviderTimeoutError,
    EmptyResponseError,
)

__all__ = [
    "PromptBuilder",
    "ResponseParser",
    "create_provider",
    "LLMProvider",
    "LLMResponse",
    "LLMProviderError",
    "AuthenticationError",
    "RateLimitError",
    "QuotaExhaustedError",
    "ModelNotFoundError",
    "ContentFilterError",
    "ProviderUnavailableError",
    "ProviderTimeoutError",
    "EmptyResponseError",
]
