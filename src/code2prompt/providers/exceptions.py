"""Exceptions for LLM provider requests."""

from typing import Any


class ProviderError(Exception):
    """Base exception for provider operations."""


class ProviderFailure(ProviderError):
    """Raised when a single provider invocation fails or returns an unusable response."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AllProvidersExhausted(ProviderError):
    """Raised when no remaining provider is eligible or every attempt failed."""

    def __init__(self, failures: list[Any], last_error: BaseException | None = None):
        detail = f"{type(last_error).__name__}: {last_error}" if last_error else "none"
        tried = ", ".join(attempt.provider for attempt in failures) or "no eligible provider"
        super().__init__(f"All LLM providers failed ({tried}). Last error: {detail}")
        self.failures = list(failures)
        self.last_error = last_error
