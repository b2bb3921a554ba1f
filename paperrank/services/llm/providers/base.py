"""Abstract LLM Provider Interface

This module defines:
- LLMResponse: Standardized response dataclass
- LLMProvider: Abstract base class for all providers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider.

    Attributes:
        content: The generated text content
        input_tokens: Number of input tokens consumed
        output_tokens: Number of output tokens generated
        model: The model identifier used
        provider: The provider name (google, anthropic)
        latency_ms: Request latency in milliseconds
        finish_reason: Why generation stopped (stop, length, etc.)
    """

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    latency_ms: float
    finish_reason: Optional[str] = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Each provider handles its own API communication, error classification
    and response normalization. Implementations:
        - GoogleProvider: Gemini models (default)
        - AnthropicProvider: Claude models
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'google', 'anthropic')."""
        pass  # pragma: no cover - abstract method, always overridden

    @property
    @abstractmethod
    def model(self) -> str:
        """Current model identifier."""
        pass  # pragma: no cover - abstract method, always overridden

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Generate text from prompt.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with generated content and metadata

        Raises:
            LLMProviderError: Base class for all provider errors
            AuthenticationError: When the API key is rejected
            QuotaExhaustedError: When the account quota is used up
            RateLimitError: When rate limit is exceeded
            ModelNotFoundError: When the model is unavailable
            EmptyResponseError: When no text comes back
        """
        pass  # pragma: no cover - abstract method, always overridden

    def _status_code(self, error: Exception) -> Optional[int]:
        """HTTP status carried by an SDK exception, if any."""
        for attr in ("code", "status_code"):
            value = getattr(error, attr, None)
            if isinstance(value, int):
                return value
        return None
