"""Anthropic (Claude) Provider Implementation

Alternative scoring endpoint for AI reranking.
"""

import time
from typing import Any, Optional
import structlog

from paperrank.services.llm.providers.base import LLMProvider, LLMResponse
from paperrank.services.llm.exceptions import (
    LLMProviderError,
    AuthenticationError,
    QuotaExhaustedError,
    RateLimitError,
    ModelNotFoundError,
    ContentFilterError,
    ProviderUnavailableError,
    ProviderTimeoutError,
    EmptyResponseError,
)

logger = structlog.get_logger()


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider implementation."""

    DEFAULT_MODEL = "claude-3-5-haiku-latest"

    AUTH_PATTERNS = [
        "authentication",
        "invalid x-api-key",
        "invalid api key",
        "permission",
        "401",
        "403",
    ]

    MODEL_PATTERNS = [
        "not_found_error",
        "404",
    ]

    QUOTA_PATTERNS = [
        "credit balance",
        "quota",
        "billing",
    ]

    RATE_LIMIT_PATTERNS = [
        "429",
        "rate limit",
        "rate_limit",
        "ratelimit",
        "too many requests",
    ]

    TIMEOUT_PATTERNS = [
        "timeout",
        "timed out",
    ]

    RETRYABLE_PATTERNS = [
        "connection",
        "temporary",
        "internal server",
        "500",
        "502",
        "503",
        "504",
        "529",
        "overloaded",
    ]

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            model: Model identifier (default: claude-3-5-haiku-latest)

        Raises:
            LLMProviderError: If anthropic package is not installed
        """
        self._model = model
        self._client: Any = None

        try:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic(api_key=api_key)
        except ImportError:
            raise LLMProviderError(
                "anthropic package not installed. Run: pip install anthropic",
                provider="anthropic",
            )

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Generate text using Claude.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with generated content

        Raises:
            AuthenticationError: When the API key is rejected
            QuotaExhaustedError: When the credit balance is exhausted
            RateLimitError: When rate limit is exceeded
            ModelNotFoundError: When the model is unavailable
            EmptyResponseError: When the response has no text
        """
        start_time = time.time()

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise self._classify_error(e) from e

        latency_ms = (time.time() - start_time) * 1000

        content = response.content[0].text if response.content else ""
        if not content or not content.strip():
            raise EmptyResponseError(provider=self.name)

        llm_response = LLMResponse(
            content=content,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=self._model,
            provider=self.name,
            latency_ms=latency_ms,
            finish_reason=response.stop_reason,
        )

        logger.debug(
            "anthropic_generate_success",
            model=self._model,
            input_tokens=llm_response.input_tokens,
            output_tokens=llm_response.output_tokens,
            latency_ms=round(latency_ms, 1),
        )

        return llm_response

    def _classify_error(self, error: Exception) -> LLMProviderError:
        """Classify exception into appropriate error type."""
        if isinstance(error, LLMProviderError):
            return error

        error_str = str(error).lower()
        status = self._status_code(error)

        if status in (401, 403) or any(p in error_str for p in self.AUTH_PATTERNS):
            return AuthenticationError(str(error), provider=self.name)

        if status == 404 or any(p in error_str for p in self.MODEL_PATTERNS):
            return ModelNotFoundError(
                str(error), model=self._model, provider=self.name
            )

        if any(p in error_str for p in self.QUOTA_PATTERNS):
            return QuotaExhaustedError(str(error), provider=self.name)

        if status == 429 or any(p in error_str for p in self.RATE_LIMIT_PATTERNS):
            return RateLimitError(
                str(error),
                retry_after=self._extract_retry_after(error),
                provider=self.name,
            )

        if "content" in error_str and ("filter" in error_str or "policy" in error_str):
            return ContentFilterError(str(error), provider=self.name)

        if any(p in error_str for p in self.TIMEOUT_PATTERNS):
            return ProviderTimeoutError(str(error), provider=self.name)

        if (status is not None and status >= 500) or any(
            p in error_str for p in self.RETRYABLE_PATTERNS
        ):
            return ProviderUnavailableError(str(error), provider=self.name)

        return LLMProviderError(str(error), provider=self.name)

    def _extract_retry_after(self, error: Exception) -> Optional[float]:
        """Extract retry-after value from error if available."""
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if headers is None:
            return None
        retry_after = headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return None
        return None
