"""LLM provider selection and fallback requests."""

from code2prompt.providers.clients import (
    AnthropicClient,
    LLMClient,
    OpenAIChatClient,
    create_client,
)
from code2prompt.providers.driver import FallbackRequestDriver
from code2prompt.providers.exceptions import (
    AllProvidersExhausted,
    ProviderError,
    ProviderFailure,
)
from code2prompt.providers.selector import ProviderSelector

__all__ = [
    "AllProvidersExhausted",
    "AnthropicClient",
    "FallbackRequestDriver",
    "LLMClient",
    "OpenAIChatClient",
    "ProviderError",
    "ProviderFailure",
    "ProviderSelector",
    "create_client",
]
