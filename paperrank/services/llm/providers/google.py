"""Google (Gemini) Provider Implementation

Default scoring endpoint for AI reranking.
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


class GoogleProvider(LLMProvider):
    """Google Gemini provider implementation.

    Known-good models: gemini-2.5-flash (default), gemini-2.0-flash,
    gemini-2.0-flash-lite, gemini-1.5-flash.
    """

    DEFAULT_MODEL = "gemini-2.5-flash"

    # Error patterns for classification, checked in this order
    AUTH_PATTERNS = [
        "api key not valid",
        "api_key_invalid",
        "invalid api key",
        "unauthenticated",
        "authentication",
        "permission",
        "401",
        "403",
    ]

    MODEL_PATTERNS = [
        "404",
        "not_found",
        "is not found",
        "not supported for generatecontent",
    ]

    QUOTA_PATTERNS = [
        "quota",
        "resource_exhausted",
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
        "deadline",
    ]

    RETRYABLE_PATTERNS = [
        "connection",
        "temporary",
        "internal",
        "500",
        "502",
        "503",
        "504",
        "unavailable",
        "overloaded",
    ]

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
    ):
        """Initialize Google provider.

        Args:
            api_key: Google AI Studio API key
            model: Model identifier (default: gemini-2.5-flash)

        Raises:
            LLMProviderError: If google-genai package is not installed
        """
        self._model = model
        self._client: Any = None

        try:
            from google import genai

            self._client = genai.Client(api_key=api_key)
        except ImportError:
            raise LLMProviderError(
                "google-genai package not installed. Run: pip install google-genai",
                provider="google",
            )

    @property
    def name(self) -> str:
        return "google"

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Generate text using Gemini.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with generated content

        Raises:
            AuthenticationError: When the API key is rejected
            QuotaExhaustedError: When the quota is used up
            RateLimitError: When rate limit is exceeded
            ModelNotFoundError: When the model is unavailable
            ContentFilterError: When content is blocked
            EmptyResponseError: When the response has no text
        """
        start_time = time.time()

        try:
            from google.genai import types

            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )
        except Exception as e:
            raise self._classify_error(e) from e

        latency_ms = (time.time() - start_time) * 1000

        content = getattr(response, "text", None) or ""
        if not content.strip():
            raise EmptyResponseError(provider=self.name)

        usage = getattr(response, "usage_metadata", None)
        input_tokens = (getattr(usage, "prompt_token_count", 0) or 0) if usage else 0
        output_tokens = (
            (getattr(usage, "candidates_token_count", 0) or 0) if usage else 0
        )

        llm_response = LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=self._model,
            provider=self.name,
            latency_ms=latency_ms,
            finish_reason=self._get_finish_reason(response),
        )

        logger.debug(
            "google_generate_success",
            model=self._model,
            input_tokens=llm_response.input_tokens,
            output_tokens=llm_response.output_tokens,
            latency_ms=round(latency_ms, 1),
        )

        return llm_response

    def _get_finish_reason(self, response: Any) -> Optional[str]:
        """Extract finish reason from response."""
        candidates = getattr(response, "candidates", None)
        if candidates:
            reason = getattr(candidates[0], "finish_reason", None)
            if reason is not None:
                return str(reason)
        return None

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
            return RateLimitError(str(error), provider=self.name)

        if "safety" in error_str or "blocked" in error_str:
            return ContentFilterError(str(error), provider=self.name)

        if any(p in error_str for p in self.TIMEOUT_PATTERNS):
            return ProviderTimeoutError(str(error), provider=self.name)

        if (status is not None and status >= 500) or any(
            p in error_str for p in self.RETRYABLE_PATTERNS
        ):
            return ProviderUnavailableError(str(error), provider=self.name)

        return LLMProviderError(str(error), provider=self.name)
