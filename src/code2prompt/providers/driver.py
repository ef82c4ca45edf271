"""Fallback request loop across LLM providers."""

import logging
from typing import Any, Callable

from code2prompt.models.provider_models import (
    ProviderAttempt,
    ProviderSettings,
    ProviderSpec,
    RequestOutcome,
)
from code2prompt.providers.clients import LLMClient, create_client
from code2prompt.providers.exceptions import AllProvidersExhausted
from code2prompt.providers.selector import ProviderSelector
from code2prompt.scripting.schema_builder import resolve_response_schema
from code2prompt.utils.tokens import count_tokens

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str], int]
ClientFactory = Callable[[ProviderSpec, str], LLMClient]


class FallbackRequestDriver:
    """Sends a prompt to the first eligible provider, falling back on failure."""

    def __init__(
        self,
        settings: ProviderSettings,
        token_counter: TokenCounter = count_tokens,
        client_factory: ClientFactory = create_client,
    ):
        self.settings = settings
        self.selector = ProviderSelector(settings)
        self.token_counter = token_counter
        self.client_factory = client_factory

    def request(
        self,
        prompt: str,
        schema: Any = None,
        preferences: list[str] | None = None,
    ) -> RequestOutcome:
        """Send a prompt, trying providers in preference order.

        Args:
            prompt: Full prompt text.
            schema: Optional response schema (pydantic model class or
                JSON example); the answer is unwrapped from its envelope.
            preferences: Provider order; defaults to the settings order.
                The list passed in is never modified.

        Returns:
            RequestOutcome with the normalized data, usage, the provider
            that answered and every failed attempt before it.

        Raises:
            AllProvidersExhausted: No remaining provider is eligible.
        """
        envelope = resolve_response_schema(schema)
        remaining = list(self.settings.preferences if preferences is None else preferences)
        prompt_tokens = self.token_counter(prompt)
        failures: list[ProviderAttempt] = []
        last_error: BaseException | None = None

        while remaining:
            spec = self.selector.select(prompt_tokens, remaining)
            if spec is None:
                break
            logger.debug("Chosen LLM provider: %s (%s)", spec.name, spec.model)
            try:
                client = self.client_factory(spec, self.settings.credentials[spec.name])
                result = client.complete(prompt, envelope)
            except Exception as exc:
                last_error = exc
                failures.append(
                    ProviderAttempt(provider=spec.name, error=f"{type(exc).__name__}: {exc}")
                )
                remaining = [name for name in remaining if name != spec.name]
                logger.debug(
                    "LLM provider %s failed: %s; remaining preferences: %s",
                    spec.name,
                    exc,
                    remaining,
                )
                continue
            return RequestOutcome(
                data=result.data,
                usage=result.usage,
                provider=spec.name,
                failures=failures,
            )

        raise AllProvidersExhausted(failures, last_error) from last_error
