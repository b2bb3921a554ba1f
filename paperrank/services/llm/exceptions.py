"""LLM Provider Exception Hierarchy

Structured exception types for the scoring endpoint behind AI reranking:
- LLMProviderError: Base class for all provider errors
- AuthenticationError: Invalid, revoked or unauthorized API key
- QuotaExhaustedError: Billing quota or daily allowance used up
- RateLimitError: Request rate exceeded
- ModelNotFoundError: Model name unknown or not enabled for the key
- ContentFilterError: Prompt or output blocked by safety filters
- ProviderUnavailableError: Provider temporarily unavailable
- ProviderTimeoutError: Request exceeded the per-batch timeout
- EmptyResponseError: Provider returned no text

The reranker stops the whole run on the first four; the rest only fail the
current batch.
"""

from typing import Optional


class LLMProviderError(Exception):
    """Base exception for all LLM provider errors."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class AuthenticationError(LLMProviderError):
    """Raised when the API key is rejected or lacks permission.

    NOT retryable: every further request with the same key fails too.
    """

    def __init__(
        self,
        message: str = "API authentication failed",
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)


class RateLimitError(LLMProviderError):
    """Raised when the provider rate limit is exceeded.

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by API)
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[float] = None,
        provider: Optional[str] = None,
    ):
        self.retry_after = retry_after
        super().__init__(
            f"{message}. Retry after: {retry_after}s" if retry_after else message,
            provider=provider,
        )


class QuotaExhaustedError(RateLimitError):
    """Raised when the account quota is used up.

    Unlike a transient rate limit, waiting a few seconds does not help.
    """

    def __init__(
        self,
        message: str = "API quota exhausted",
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)


class ModelNotFoundError(LLMProviderError):
    """Raised when the requested model is not available to this key."""

    def __init__(
        self,
        message: str = "Model not found",
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        self.model = model
        super().__init__(
            f"{message}: {model}" if model else message,
            provider=provider,
        )


class ContentFilterError(LLMProviderError):
    """Raised when content is blocked by safety filters."""

    def __init__(
        self,
        message: str = "Content blocked by safety filters",
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)


class ProviderUnavailableError(LLMProviderError):
    """Raised when the provider is temporarily unavailable.

    Includes server errors (500, 502, 503, 504) and overload responses.
    """

    def __init__(
        self,
        message: str = "Provider temporarily unavailable",
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)


class ProviderTimeoutError(LLMProviderError):
    """Raised when a request does not complete within its timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout: Optional[float] = None,
        provider: Optional[str] = None,
    ):
        self.timeout = timeout
        super().__init__(
            f"{message} after {timeout}s" if timeout else message,
            provider=provider,
        )


class EmptyResponseError(LLMProviderError):
    """Raised when the provider returns no text content."""

    def __init__(
        self,
        message: str = "Empty response from provider",
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)
